#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
PACKAGE_NAME = "calrecur"
CONFIGS_ROOT = f"pkg://{PACKAGE_NAME}.configs"
EXPAND_CONFIG_NAME = "expand_recurrence"
DEFAULT_MAX_PROBE = 1000
"""Upper bound on the number of occurrence indices probed when scanning a rule."""
DAYS_PER_WEEK = 7
