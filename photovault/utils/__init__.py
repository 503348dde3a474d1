from photovault.utils.dates import get_now
from photovault.utils.get_environment_path import get_env_paths
