"""
Zentrale Konstanten für AddNoise
"""

# Host Parameter-Map Keys
PARAM_NOISE_TYPE = 'm_noiseType'
PARAM_SIGMA = 'sigma'
PARAM_MEAN = 'mean'
PARAM_SALT_P = 'm_salt_p'
PARAM_PEPPER_P = 'm_pepper_p'
PARAM_MAP_KEYS = (PARAM_NOISE_TYPE, PARAM_SIGMA, PARAM_MEAN, PARAM_SALT_P, PARAM_PEPPER_P)

# Rausch-Typen (wie im Host-Dropdown angezeigt)
NOISE_GAUSSIAN = 'Gaussian'
NOISE_SALT_PEPPER = 'Salt_Pepper'
NOISE_TYPES = [NOISE_GAUSSIAN, NOISE_SALT_PEPPER]

# Pixel Konstanten (8-bit)
PIXEL_MIN = 0
PIXEL_MAX = 255

# Plugin Konstanten
PLUGIN_ID = 'add_noise'
PLUGIN_NAME = 'AddNoise'
PLUGIN_VERSION = '1.0.0'
PROGRESS_STEPS = 1

# Logging Konstanten
DEFAULT_LOG_DIR = 'logs'
DEFAULT_MAX_LOG_FILES = 10
LOG_FILE_PREFIX = 'addnoise'
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

# Bild-Dateiformate für die CLI
IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff')
