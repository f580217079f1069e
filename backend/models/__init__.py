from models.availability_interval import AvailabilityInterval
from models.base import Base
from models.schedule_configuration import ScheduleConfiguration

__all__ = [
	"AvailabilityInterval",
	"Base",
	"ScheduleConfiguration",
]
