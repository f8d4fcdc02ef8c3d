"""
Deterministic calculation pipeline.

Pure Python math. No I/O, no database.
Given ExcavationInputs, derive geometry, volumes, the hand/machine split,
production hours and duration, with an audit entry for every derived value.
"""
