"""
Facilitator Summary Service

Pending review work for a coach's participants (or everyone, for admins)
and a per-participant roll-up of what is waiting and where each
participant is in the journey.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .base import Row, group_rows, key_of


@dataclass
class PendingSummary:
    tasks: int
    documents: int
    trades: int
    enrollments: int
    stagesNotStarted: int

    @property
    def total(self) -> int:
        return self.tasks + self.documents + self.trades + self.enrollments


@dataclass
class ParticipantSummary:
    id: str
    full_name: str
    email: str
    batch_number: str | None
    pendingTasks: int
    pendingDocuments: int
    pendingTrades: int
    currentStage: int
    stageStatus: str

    @property
    def pending_total(self) -> int:
        return self.pendingTasks + self.pendingDocuments + self.pendingTrades


@dataclass
class FacilitatorSummary:
    summary: PendingSummary
    totalPending: int
    participants: list[ParticipantSummary] = field(default_factory=list)


def current_stage(progress: list[Row], stage_orders: dict[str, int], total_stages: int) -> tuple[int, str]:
    """
    Where a participant currently is.

    The stage in progress wins; otherwise the stage after the last
    completed one; otherwise stage 1. Status is 'completed' only once every
    active stage is done.
    """
    completed = sum(1 for p in progress if p.get('status') == 'completed')
    active = next((p for p in progress if p.get('status') == 'in_progress'), None)

    if active is not None:
        return stage_orders.get(key_of(active, 'stage_id')) or 1, 'in_progress'
    order = completed + 1 if completed > 0 else 1
    if total_stages and completed >= total_stages:
        return order, 'completed'
    return order, 'not_started'


def build_facilitator_summary(
    participants: list[Row],
    stages: list[Row],
    progress: list[Row],
    pending_tasks: list[Row],
    pending_documents: list[Row],
    pending_trades: list[Row],
    pending_enrollments: list[Row],
) -> FacilitatorSummary:
    """
    Args:
        participants: the caller's participants (role scoped)
        stages: active journey stages
        progress: participant_progress rows for those participants
        pending_*: rows already filtered to their "awaiting review" status
    """
    ids = {str(p['id']) for p in participants}

    def mine(rows: list[Row]) -> list[Row]:
        return [r for r in rows if key_of(r, 'user_id') in ids]

    progress = mine(progress)
    tasks_by = group_rows(mine(pending_tasks), 'user_id')
    docs_by = group_rows(mine(pending_documents), 'user_id')
    trades_by = group_rows(mine(pending_trades), 'user_id')
    progress_by = group_rows(progress, 'user_id')
    stage_orders = {str(s['id']): s.get('stage_order') or 1 for s in stages}

    summary = PendingSummary(
        tasks=sum(len(v) for v in tasks_by.values()),
        documents=sum(len(v) for v in docs_by.values()),
        trades=sum(len(v) for v in trades_by.values()),
        enrollments=len(mine(pending_enrollments)),
        stagesNotStarted=max(len(participants) * len(stages) - len(progress), 0),
    )

    rows = []
    for profile in participants:
        uid = str(profile['id'])
        order, status = current_stage(progress_by.get(uid, []), stage_orders, len(stages))
        rows.append(ParticipantSummary(
            id=uid,
            full_name=profile.get('full_name') or 'Unknown',
            email=profile.get('email') or '',
            batch_number=profile.get('batch_number'),
            pendingTasks=len(tasks_by.get(uid, [])),
            pendingDocuments=len(docs_by.get(uid, [])),
            pendingTrades=len(trades_by.get(uid, [])),
            currentStage=order,
            stageStatus=status,
        ))

    # Stable sort keeps the incoming (name) order among equals
    rows.sort(key=lambda r: r.pending_total, reverse=True)

    return FacilitatorSummary(summary=summary, totalPending=summary.total, participants=rows)
