"""Settings package for the rental marketplace.

`base.py` contains the configuration shared across environments. The
`dev.py`, `prod.py` and `test.py` modules extend it with environment
specific overrides.
"""
