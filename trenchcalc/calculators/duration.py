"""
Workday duration, critical path and the crew/equipment hour summaries.

Machine duration is spread over the operators; hand hours are already
crew-hours for all laborers working together, so they are only divided by
the effective hours per day.
"""

from ..models import AuditCategory, CriticalPath
from ..reference_data import workdays_to_calendar_days
from ..schemas import (
    CrewSummary, DurationResult, EquipmentSummary, ExcavationInputs,
    ProductionResult, ScheduleSummary,
)
from .audit import AuditSink
from .base import BaseStage


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


class DurationCalculator(BaseStage):

    def calculate(self, inputs: ExcavationInputs, production: ProductionResult,
                  sink: AuditSink) -> ScheduleSummary:
        crew = inputs.crew
        schedule = inputs.schedule
        effective_hours = schedule.hours_per_day * schedule.shifts_per_day

        machine_duration = self.safe_divide(production.machine_hours,
                                            crew.operators * effective_hours)
        sink.record(
            AuditCategory.DURATION, "Machine Duration", "Workdays for machine excavation",
            formula=(f"{production.machine_hours:.2f} hrs ÷ ({crew.operators} operators × "
                     f"{effective_hours} hrs/day)"),
            inputs={
                "machine_hours": f"{production.machine_hours:.2f} hrs",
                "operators": crew.operators,
                "hours_per_day": effective_hours,
            },
            result=f"{machine_duration:.2f} workdays",
        )

        hand_duration = self.safe_divide(production.hand_hours, effective_hours)
        if production.hand_hours > 0:
            sink.record(
                AuditCategory.DURATION, "Hand Dig Duration", "Workdays for hand excavation",
                formula=f"{production.hand_hours:.2f} hrs ÷ {effective_hours} hrs/day",
                inputs={
                    "hand_hours": f"{production.hand_hours:.2f} hrs",
                    "hours_per_day": effective_hours,
                },
                result=f"{hand_duration:.2f} workdays",
            )

        # Ties go to the machine
        if machine_duration >= hand_duration:
            critical_path = CriticalPath.MACHINE
            controls = "Machine excavation controls duration"
        else:
            critical_path = CriticalPath.HAND
            controls = "Hand excavation controls duration"
        total_duration = max(machine_duration, hand_duration)
        sink.record(AuditCategory.DURATION, "Critical Path", controls,
                    result=f"{total_duration:.2f} workdays")

        calendar_days = workdays_to_calendar_days(total_duration, schedule.working_days_per_week)
        sink.record(
            AuditCategory.DURATION, "Calendar Days",
            "Workdays converted to calendar days (weekends included)",
            formula=f"{total_duration:.2f} workdays at {schedule.working_days_per_week} days/week",
            inputs={"working_days_per_week": schedule.working_days_per_week},
            result=f"{calendar_days:.2f} calendar days",
        )

        duration = DurationResult(
            machine_duration=machine_duration,
            hand_duration=hand_duration,
            total_duration=total_duration,
            critical_path=critical_path,
            calendar_days=calendar_days,
        )
        crew_summary = self._crew_summary(inputs, production, total_duration * effective_hours,
                                          sink)
        equipment_summary = self._equipment_summary(production, sink)
        return ScheduleSummary(
            duration=duration,
            crew_summary=crew_summary,
            equipment_summary=equipment_summary,
        )

    def _crew_summary(self, inputs: ExcavationInputs, production: ProductionResult,
                      total_work_hours: float, sink: AuditSink) -> CrewSummary:
        crew = inputs.crew
        operator_hours = production.machine_hours + production.vacuum_hours
        laborer_hours = production.hand_hours * crew.laborers + production.machine_hours
        foreman_hours = total_work_hours if crew.foreman else 0.0
        spotter_hours = production.machine_hours if crew.spotter else 0.0
        competent_person_hours = total_work_hours if crew.competent_person else 0.0
        total = (operator_hours + laborer_hours + foreman_hours
                 + spotter_hours + competent_person_hours)
        sink.record(
            AuditCategory.DURATION, "Crew Hours Summary", "Total labor hours by role",
            inputs={
                "operators": crew.operators,
                "laborers": crew.laborers,
                "foreman": _yes_no(crew.foreman),
                "spotter": _yes_no(crew.spotter),
                "competent_person": _yes_no(crew.competent_person),
            },
            result=f"Total: {total:.2f} labor-hours",
        )
        return CrewSummary(
            operator_hours=operator_hours,
            laborer_hours=laborer_hours,
            foreman_hours=foreman_hours,
            spotter_hours=spotter_hours,
            competent_person_hours=competent_person_hours,
            total_labor_hours=total,
        )

    def _equipment_summary(self, production: ProductionResult,
                           sink: AuditSink) -> EquipmentSummary:
        total = production.machine_hours + production.vacuum_hours + production.sawcut_hours
        sink.record(
            AuditCategory.DURATION, "Equipment Hours Summary", "Total equipment hours by type",
            result=f"Total: {total:.2f} equipment-hours",
        )
        return EquipmentSummary(
            excavator_hours=production.machine_hours,
            vacuum_truck_hours=production.vacuum_hours,
            sawcut_equipment_hours=production.sawcut_hours,
            total_equipment_hours=total,
        )
