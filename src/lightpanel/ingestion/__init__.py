"""Inbound payload normalization.

Everything the bridge delivers passes through here before it reaches
the state layer, so the stores only ever see plain booleans and
coerced participant ids.
"""
