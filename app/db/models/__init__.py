from app.db.database import Base

# Import models
from app.db.models.stores import Stores, WorkspaceType
from app.db.models.employees import Employees, EmploymentStatus
from app.db.models.students import Students, StudentStatus
from app.db.models.shift_templates import ShiftTemplates
from app.db.models.shift_requirements import ShiftRequirements
from app.db.models.availability_entries import AvailabilityEntries
from app.db.models.schedule_generations import ScheduleGenerations
from app.db.models.schedule_assignments import ScheduleAssignments, AssignmentSource
from app.db.models.auto_schedule_triggers import AutoScheduleTriggers

__all__ = [
    "Base",
    # Models
    "Stores",
    "Employees",
    "Students",
    "ShiftTemplates",
    "ShiftRequirements",
    "AvailabilityEntries",
    "ScheduleGenerations",
    "ScheduleAssignments",
    "AutoScheduleTriggers",
    # Enums
    "WorkspaceType",
    "EmploymentStatus",
    "StudentStatus",
    "AssignmentSource",
]
