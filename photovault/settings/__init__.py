from photovault.settings.app_settings import Settings, settings, load_settings
from photovault.settings.log_settings import VaultLogger
from photovault.settings.bootstrap import bootstrap_config
