"""
Seed script for the AutoShift development database.

- One business store with auto-schedule enabled
- 5 active employees, 1 on leave (not rostered)
- Three shift templates, including an overnight one
- Staffing requirements for the current week
- Availability for every active employee except the last one, so submitting
  for them through the API triggers the automatic generation

Run with: python -m scripts.seed_demo
"""

import sys
from datetime import date, time, timedelta
from sqlalchemy import delete
from app.db.database import Base, SessionLocal, engine
from app.db.models.stores import Stores, WorkspaceType
from app.db.models.employees import Employees, EmploymentStatus
from app.db.models.shift_templates import ShiftTemplates
from app.db.models.shift_requirements import ShiftRequirements
from app.db.models.availability_entries import AvailabilityEntries
from app.db.models.schedule_assignments import ScheduleAssignments
from app.db.models.schedule_generations import ScheduleGenerations
from app.db.models.auto_schedule_triggers import AutoScheduleTriggers


def clear_tables(db):
    """Delete all rows, children first."""
    print("Clearing tables...")

    for model in [
        AutoScheduleTriggers,
        ScheduleAssignments,
        ScheduleGenerations,
        AvailabilityEntries,
        ShiftRequirements,
        ShiftTemplates,
        Employees,
        Stores,
    ]:
        db.execute(delete(model))

    db.commit()
    print("All tables cleared.")


def get_current_week_monday():
    """Get the Monday of the current week."""
    today = date.today()
    monday = today - timedelta(days=today.weekday())
    return monday


def seed_stores(db):
    print("Seeding stores...")
    db.add(Stores(
        id=1,
        name="High Street",
        workspace_type=WorkspaceType.BUSINESS,
        timezone="Europe/London",
        auto_schedule_enabled=True,
    ))
    db.commit()
    print("Seeded 1 store.")


def seed_employees(db):
    print("Seeding employees...")
    employees = [
        Employees(id=1, store_id=1, name="Alice Smith"),
        Employees(id=2, store_id=1, name="Bob Jones"),
        Employees(id=3, store_id=1, name="Carol White"),
        Employees(id=4, store_id=1, name="David Brown"),
        Employees(id=5, store_id=1, name="Emma Green"),
        # Not rostered
        Employees(id=6, store_id=1, name="Frank Black", employment_status=EmploymentStatus.ON_LEAVE),
    ]
    db.add_all(employees)
    db.commit()
    print(f"Seeded {len(employees)} employees.")


def seed_shift_templates(db):
    print("Seeding shift templates...")
    templates = [
        ShiftTemplates(id=1, store_id=1, name="Morning", start_time=time(7, 0), end_time=time(15, 0), color="#f6c344"),
        ShiftTemplates(id=2, store_id=1, name="Evening", start_time=time(15, 0), end_time=time(23, 0), color="#4a7bd0"),
        ShiftTemplates(id=3, store_id=1, name="Night", start_time=time(23, 0), end_time=time(7, 0), color="#2d2d52"),
    ]
    db.add_all(templates)
    db.commit()
    print(f"Seeded {len(templates)} shift templates.")


def seed_requirements(db, monday):
    """Two on mornings and evenings, one overnight; Sunday closed at night."""
    print("Seeding shift requirements...")
    requirements = []
    for day in range(7):
        requirements.append(ShiftRequirements(store_id=1, week_start_date=monday, day_of_week=day,
                                              shift_template_id=1, required_staff_count=2))
        requirements.append(ShiftRequirements(store_id=1, week_start_date=monday, day_of_week=day,
                                              shift_template_id=2, required_staff_count=2))
        requirements.append(ShiftRequirements(store_id=1, week_start_date=monday, day_of_week=day,
                                              shift_template_id=3, required_staff_count=0 if day == 6 else 1))
    db.add_all(requirements)
    db.commit()
    print(f"Seeded {len(requirements)} shift requirements.")


def seed_availability(db, monday):
    """Employees 1-4 submit; employee 5 is left for the API."""
    print("Seeding availability...")
    offered = {
        1: [(d, 1) for d in range(6)],                      # mornings Mon-Sat
        2: [(d, t) for d in range(7) for t in (1, 2)],      # days, flexible
        3: [(d, 2) for d in range(7)] + [(d, 3) for d in range(3)],
        4: [(d, 3) for d in range(7)],                      # nights
    }
    count = 0
    for worker_id, slots in offered.items():
        for day_of_week, template_id in slots:
            db.add(AvailabilityEntries(
                worker_id=worker_id,
                store_id=1,
                week_start_date=monday,
                shift_template_id=template_id,
                day_of_week=day_of_week,
                is_available=True,
            ))
            count += 1
    db.commit()
    print(f"Seeded {count} availability entries.")


def main():
    """Main seed function."""
    print("\n" + "="*50)
    print("AutoShift Database Seeder")
    print("="*50 + "\n")

    response = input("This will DELETE ALL EXISTING DATA. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(0)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    monday = get_current_week_monday()

    try:
        clear_tables(db)

        seed_stores(db)
        seed_employees(db)
        seed_shift_templates(db)
        seed_requirements(db, monday)
        seed_availability(db, monday)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print(f"\nWeek: {monday.isoformat()}")
        print("Submit availability for employee 5 to trigger generation:")
        print(f"  POST /api/v1/stores/1/availability/{monday.isoformat()}")
        print('  {"worker_id": 5, "slots": [{"day_of_week": 0, "shift_template_id": 1}]}')
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
