"""Optional YAML configuration for scans."""

from .loader import CONFIG_FILE_NAME, ScanConfig, load_scan_config

__all__ = ["CONFIG_FILE_NAME", "ScanConfig", "load_scan_config"]
