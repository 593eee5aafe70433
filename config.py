"""
Configuration constants for the CT Volume Preset Viewer.
All defaults and tunable rendering parameters are centralized here.
"""

# ==========================================
# Window Settings
# ==========================================
WINDOW_TITLE = "CT Volume Preset Viewer"
WINDOW_SIZE = (900, 700)
BACKGROUND_COLOR = (0.1, 0.1, 0.12)

# ==========================================
# Loader Settings
# ==========================================
LOADER_MAX_WORKERS = 4            # Number of parallel threads for file reading
LOADER_SERIES_INDEX = -1          # Which discovered series to load (-1 = last)

# Default rescale when the RescaleSlope/RescaleIntercept tags are absent
DEFAULT_RESCALE_SLOPE = 1.0
DEFAULT_RESCALE_INTERCEPT = 0.0

# ==========================================
# Preset Settings
# ==========================================
DEFAULT_PRESET = 'soft'

# Minimum window width (HU); narrower windows are floored to this value
MIN_WINDOW_WIDTH = 1.0

# ==========================================
# Volume Property
# ==========================================
VOLUME_SHADE = True
VOLUME_INTERPOLATION = 'linear'   # 'linear' | 'nearest'
VOLUME_AMBIENT = 0.2
VOLUME_DIFFUSE = 0.9
VOLUME_SPECULAR = 0.2

# Gradient magnitude -> opacity multiplier (suppresses flat/noisy regions)
GRADIENT_OPACITY_POINTS = (
    (0.0, 0.0),
    (50.0, 0.0),
    (110.0, 0.32),
    (400.0, 1.0),
)

# Scalar opacity unit distance floor (world units)
MIN_UNIT_DISTANCE = 0.5
