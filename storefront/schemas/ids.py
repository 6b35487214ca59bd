"""Bounds shared by every integer record id."""

# Integer primary keys are 32-bit signed on PostgreSQL
MAX_RECORD_ID = 2**31 - 1
