"""
Stamp bigratio/version.py before packaging a bigratio release.

bigratio/version.py is a docstring-only module.  setup.py reads that docstring as the
distribution version, and bigratio/__init__.py exports it as bigratio.__version__.
Run from the repository root.
"""

import datetime

VERSION_BASE = '0.1.0'
VERSION_PY = 'bigratio/version.py'
yyyy_mmdd_hhmm_ss = datetime.datetime.now(datetime.timezone.utc).strftime('%Y.%m%d.%H%M.%S')
# EXAMPLE:  "2026.1018.1200.00" for a release stamped at noon UTC

with open(VERSION_PY, 'w') as version_py:
    version_py.write('"""')
    version_py.write(VERSION_BASE)
    version_py.write('.')
    version_py.write(yyyy_mmdd_hhmm_ss)
    version_py.write('"""')
    # EXAMPLE:  bigratio.__version__ == '0.1.0.2026.1018.1200.00'
