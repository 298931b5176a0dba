"""Service wiring.

create_policy_service() builds a ready-to-use PolicyVersionService from
Settings. Collaborators can be overridden individually, which is how tests
swap in the virtual-time scheduler and a fixed clock.
"""

from typing import Optional

from .auth.roles import RoleAuthorizer
from .clock import Clock, IdGenerator, random_id, utc_now
from .config import Settings, get_settings
from .lifecycle.service import PolicyVersionService
from .observability.logging_config import configure_logging
from .review_linkage.callbacks import ReviewerCallbacks
from .review_linkage.in_memory_desk import InMemoryReviewDesk
from .review_linkage.ports import ReviewIntakePort
from .seed import build_demo_versions
from .workers.scheduler import JobScheduler, TimerJobScheduler


def create_policy_service(
    settings: Optional[Settings] = None,
    scheduler: Optional[JobScheduler] = None,
    review_intake: Optional[ReviewIntakePort] = None,
    clock: Clock = utc_now,
    new_id: IdGenerator = random_id,
    authorizer: Optional[RoleAuthorizer] = None,
    setup_logging: bool = True,
) -> PolicyVersionService:
    """Build a PolicyVersionService.

    Args:
        settings: Settings (default: get_settings())
        scheduler: Job scheduler (default: TimerJobScheduler)
        review_intake: Review queue port (default: InMemoryReviewDesk)
        clock: Time source
        new_id: Id generator
        authorizer: Optional role check
        setup_logging: Configure logging from LOG_LEVEL / LOG_JSON

    Example:
        service = create_policy_service()
        unsubscribe = service.subscribe(lambda: print(len(service.list_versions())))
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

    seed_loader = None
    if settings.SEED_DEMO_DATA:
        seed_loader = lambda: build_demo_versions(clock())  # noqa: E731

    return PolicyVersionService(
        scheduler=scheduler or TimerJobScheduler(),
        review_intake=review_intake or InMemoryReviewDesk(clock=clock, new_id=new_id),
        settings=settings,
        clock=clock,
        new_id=new_id,
        authorizer=authorizer,
        seed_loader=seed_loader,
    )


def create_reviewer_callbacks(
    service: PolicyVersionService,
    desk: Optional[InMemoryReviewDesk] = None,
) -> ReviewerCallbacks:
    """Inbound adapter for the review desk bound to `service`"""
    return ReviewerCallbacks(service, desk)
