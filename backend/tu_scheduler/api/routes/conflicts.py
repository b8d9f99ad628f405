from collections.abc import Callable

from fastapi import APIRouter, Depends

from tu_scheduler.api.deps import get_abort_check, get_repository
from tu_scheduler.schemas.conflict import (
    AlternativeRoom,
    AlternativeTime,
    AutoResolveResult,
    ConflictCheckRequest,
    ConflictReport,
)
from tu_scheduler.services.conflict_detector import ConflictDetector
from tu_scheduler.services.exclusion import ExclusionSet
from tu_scheduler.services.repository import ScheduleRepository
from tu_scheduler.services.resolution import ConflictResolver

router = APIRouter()


@router.post("/detect", response_model=ConflictReport)
def detect_conflicts(
    request: ConflictCheckRequest,
    repository: ScheduleRepository = Depends(get_repository),
) -> ConflictReport:
    conflicts = ConflictDetector(repository).detect(request.proposal, ExclusionSet(request.exclude_ids))
    return ConflictReport(has_conflicts=bool(conflicts), conflicts=conflicts)


@router.post("/alternative-times", response_model=list[AlternativeTime])
def suggest_alternative_times(
    request: ConflictCheckRequest,
    repository: ScheduleRepository = Depends(get_repository),
    should_abort: Callable[[], bool] = Depends(get_abort_check),
) -> list[AlternativeTime]:
    resolver = ConflictResolver(repository, should_abort=should_abort)
    return resolver.suggest_alternative_times(request.proposal, ExclusionSet(request.exclude_ids))


@router.post("/alternative-rooms", response_model=list[AlternativeRoom])
def suggest_alternative_rooms(
    request: ConflictCheckRequest,
    repository: ScheduleRepository = Depends(get_repository),
    should_abort: Callable[[], bool] = Depends(get_abort_check),
) -> list[AlternativeRoom]:
    resolver = ConflictResolver(repository, should_abort=should_abort)
    return resolver.suggest_alternative_rooms(request.proposal, ExclusionSet(request.exclude_ids))


@router.post("/auto-resolve", response_model=AutoResolveResult)
def auto_resolve(
    request: ConflictCheckRequest,
    repository: ScheduleRepository = Depends(get_repository),
    should_abort: Callable[[], bool] = Depends(get_abort_check),
) -> AutoResolveResult:
    resolver = ConflictResolver(repository, should_abort=should_abort)
    return resolver.auto_resolve(request.proposal, ExclusionSet(request.exclude_ids))
