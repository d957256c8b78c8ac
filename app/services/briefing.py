# path: trip-briefing-api/app/services/briefing.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
import random

from app.models.progress_models import Briefing, ProgressReport, Weather
from app.services.weather import DEFAULT_WEATHER


ENCOURAGEMENTS = (
    "You're doing great! Keep moving forward.",
    "Every step brings you closer to your goal.",
    "Enjoying the journey is just as important as reaching the destination.",
    "Your determination is inspiring!",
    "Remember to take in the scenery along the way.",
)

TIP_STARTING = "Pace yourself! You're just getting started on this journey."
TIP_HYDRATE = "You've made good progress, but remember to stay hydrated!"
TIP_HALFWAY = "You're over halfway there - keep up the good work!"
TIP_FINAL_STRETCH = "You're in the final stretch! Push through to complete your route."
TIP_WARM = "It's quite warm today. Remember to drink plenty of water and use sun protection."
TIP_COOL = "It's a bit cool today. Consider wearing an extra layer to stay comfortable."
TIP_RAIN = "Watch out for slippery surfaces due to rain."

WARM_ABOVE_F = 80
COOL_BELOW_F = 60


def _num(value: float) -> str:
    return f"{value:g}"


def time_of_day(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    return "evening"


def weather_line(weather: Weather) -> str:
    return (
        f"Current conditions: {_num(weather.temperature)}°F, {weather.condition}, "
        f"with {_num(weather.humidity)}% humidity."
    )


def greeting_line(route_name: str, now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    return f'Good {time_of_day(hour)}! Your journey on "{route_name}" continues.'


def progress_line(report: ProgressReport) -> str:
    return (
        f"You've completed {report.progress_percentage}% of your route "
        f"({report.completed_distance} km out of {report.total_distance} km)."
    )


def time_estimate_line(report: ProgressReport) -> str:
    eta = report.estimated_time_remaining
    return (
        f"At your current pace, you have approximately {eta.hours} hours "
        f"and {eta.minutes} minutes remaining."
    )


def progress_tips(progress_percentage: int, weather: Weather) -> List[str]:
    tips = []

    if progress_percentage < 25:
        tips.append(TIP_STARTING)
    elif progress_percentage < 50:
        tips.append(TIP_HYDRATE)
    elif progress_percentage < 75:
        tips.append(TIP_HALFWAY)
    else:
        tips.append(TIP_FINAL_STRETCH)

    if weather.temperature > WARM_ABOVE_F:
        tips.append(TIP_WARM)
    elif weather.temperature < COOL_BELOW_F:
        tips.append(TIP_COOL)

    if weather.condition == "Rainy":
        tips.append(TIP_RAIN)

    return tips


def pick_encouragement(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(ENCOURAGEMENTS)


def welcome_briefing() -> Briefing:
    return Briefing(
        greeting="Good day! Welcome to your journey assistant.",
        progress_summary="Ready to start your adventure?",
        time_estimate="Your journey awaits!",
        weather_update=weather_line(DEFAULT_WEATHER),
        tips=[
            "Remember to stay hydrated during your trip!",
            "Check the map tab to create your first route.",
        ],
        encouragement="Every journey begins with a single step.",
        source="default",
    )


def derive_local_briefing(
    report: Optional[ProgressReport],
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Briefing:
    """
    Rule-based briefing used when no assistant is reachable.

    Only the encouragement line is random; pass a seeded ``rng`` to pin it.
    ``now`` is local time and only drives the greeting.
    """
    if report is None:
        return welcome_briefing()

    return Briefing(
        greeting=greeting_line(report.route_name, now),
        progress_summary=progress_line(report),
        time_estimate=time_estimate_line(report),
        weather_update=weather_line(report.weather),
        tips=progress_tips(report.progress_percentage, report.weather),
        encouragement=pick_encouragement(rng),
        source="rules",
    )
