from tu_scheduler.models.app_setting import AppSetting  # noqa: F401
from tu_scheduler.models.course import Course  # noqa: F401
from tu_scheduler.models.instructor import Instructor  # noqa: F401
from tu_scheduler.models.room import Room  # noqa: F401
from tu_scheduler.models.schedule import Day, Schedule  # noqa: F401
from tu_scheduler.models.section import Section  # noqa: F401
