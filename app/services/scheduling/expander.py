"""
Expands recurring weekly requirements into dated shift instances.
"""

from datetime import date, timedelta

from .types import ShiftInstance, ShiftRequirement, ShiftTemplate, ScheduleInputError


def validate_week_start(week_start: date) -> None:
    if week_start.weekday() != 0:
        raise ScheduleInputError(f"week_start must be a Monday, got {week_start} ({week_start.strftime('%A')})")


def week_dates(week_start: date) -> list[date]:
    """The seven dates Monday..Sunday of the week."""
    return [week_start + timedelta(days=i) for i in range(7)]


def day_to_date(week_start: date, day_of_week: int) -> date:
    if not 0 <= day_of_week <= 6:
        raise ScheduleInputError(f"day_of_week must be 0-6, got {day_of_week}")
    return week_start + timedelta(days=day_of_week)


def expand_shift_instances(
    requirements: list[ShiftRequirement],
    templates: list[ShiftTemplate],
    week_start: date,
) -> list[ShiftInstance]:
    """
    Turn (day_of_week, template, required_count) rows into concrete instances.

    Zero-count requirements are dropped so they never produce shortfall
    warnings. Output is ordered by date, start time and template id.
    """
    validate_week_start(week_start)
    templates_by_id = {t.id: t for t in templates}

    instances = []
    for req in requirements:
        template = templates_by_id.get(req.shift_template_id)
        if template is None:
            raise ScheduleInputError(
                f"Requirement for day {req.day_of_week} references unknown shift template {req.shift_template_id}"
            )
        if req.required_count < 0:
            raise ScheduleInputError(f"required_count must be >= 0, got {req.required_count}")
        if req.required_count == 0:
            continue

        instances.append(ShiftInstance(
            date=day_to_date(week_start, req.day_of_week),
            shift_template_id=template.id,
            shift_name=template.name,
            start_time=template.start_time,
            end_time=template.end_time,
            required_count=req.required_count,
            duration_hours=template.duration_hours,
        ))

    instances.sort(key=lambda i: (i.date, i.start_time, i.shift_template_id))
    return instances
