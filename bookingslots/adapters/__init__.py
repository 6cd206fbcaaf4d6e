"""
Adapters for loading schedule data.
"""

from .yaml_schedule_source import YamlScheduleSource

__all__ = ["YamlScheduleSource"]
