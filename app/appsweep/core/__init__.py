"""Core configuration, paths and cleanup orchestration."""
