from scheduling.constants import AvailabilityStatus, CellState, Shift, Weekday
from scheduling.controller import CellController, Notification, Operation, next_transition
from scheduling.errors import (
	AvailabilitySourceError,
	ConfigurationInvalid,
	FieldError,
	Forbidden,
	MutationFailed,
	NotConfigured,
	StaleSlotReference,
)
from scheduling.reconcile import AvailabilityRecord, Cell, reconcile, summarize
from scheduling.slots import LessonSlot, ScheduleConfig, ShiftWindow, generate_slots, shift_window
from scheduling.sources import ConfigurationView
from scheduling.validation import validate_configuration

__all__ = [
	"AvailabilityRecord",
	"AvailabilitySourceError",
	"AvailabilityStatus",
	"Cell",
	"CellController",
	"CellState",
	"ConfigurationInvalid",
	"ConfigurationView",
	"FieldError",
	"Forbidden",
	"LessonSlot",
	"MutationFailed",
	"NotConfigured",
	"Notification",
	"Operation",
	"ScheduleConfig",
	"Shift",
	"ShiftWindow",
	"StaleSlotReference",
	"Weekday",
	"generate_slots",
	"next_transition",
	"reconcile",
	"shift_window",
	"summarize",
	"validate_configuration",
]
