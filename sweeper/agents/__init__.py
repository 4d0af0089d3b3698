"""Scheduled drivers for the lifecycle engine.

Classes:
    MarkerAgent: Runs mark() for every configured namespace
    NotifierAgent: Notifies owners and authorizes deletion
    CleanerAgent: Runs clean() for eligible entries under a namespace lock
    AgentScheduler: Periodic ticking of agents on daemon threads
    HealthGate: In-service flag consulted before every tick
"""

from __future__ import annotations

from sweeper.agents.base import SweeperAgent
from sweeper.agents.cleaner import CleanerAgent
from sweeper.agents.health import HealthGate, HealthStatus
from sweeper.agents.marker import MarkerAgent
from sweeper.agents.notifier import NotifierAgent
from sweeper.agents.scheduler import AgentScheduler

__all__ = [
    "AgentScheduler",
    "CleanerAgent",
    "HealthGate",
    "HealthStatus",
    "MarkerAgent",
    "NotifierAgent",
    "SweeperAgent",
]
