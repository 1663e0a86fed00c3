"""Competition rounds and the stage eligibility engine."""
