# routers/requests.py

"""
Student request endpoints.

The four request kinds share one router shape (submit, list, get, admin
transition), built by ``build_request_router``. Sleepovers and guest
visits add their PIN-gated checkout routes on top.
"""

from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from core.errors import UnauthorizedError, ValidationError
from core.permission_helpers import can_approve, is_admin, require_approver, require_submitter
from core.store import EntityStore, get_store
from dependencies.auth import CurrentUser, get_current_user
from models.enums import RequestKind
from models.requests import (
    AssignPayload,
    CheckoutPayload,
    ComplaintCreate,
    GuestVisitCreate,
    MaintenanceCreate,
    SleepoverCreate,
    TransitionPayload,
)
from services.filters import AllRequests, Mine, PendingOnly, StatusEquals, TodayOnly
from services.lifecycle_engine import RequestLifecycleEngine
from services.lifecycles import lifecycle_for


Scope = Literal["all", "mine", "pending", "today"]


def get_engine(store: EntityStore = Depends(get_store)) -> RequestLifecycleEngine:
    return RequestLifecycleEngine(store)


def _admin_filter(scope: str, status: Optional[str], current_user: CurrentUser):
    if status:
        if scope != "all":
            raise ValidationError("status cannot be combined with scope; use one or the other")
        return StatusEquals(status)
    if scope == "mine":
        return Mine(current_user.id)
    if scope == "pending":
        return PendingOnly()
    if scope == "today":
        return TodayOnly()
    return AllRequests()


# ============================================================
# Router factory
# ============================================================
def build_request_router(kind: RequestKind, prefix: str, tag: str, create_model, list_key: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])
    lifecycle = lifecycle_for(kind)

    # -----------------------------------------------------
    # SUBMIT
    # -----------------------------------------------------
    @router.post("", summary=f"Submit a {kind} request")
    def submit_request(
        payload: create_model,
        current_user: CurrentUser = Depends(get_current_user),
        engine: RequestLifecycleEngine = Depends(get_engine),
    ):
        require_submitter(current_user)

        data = payload.model_dump(mode="json", exclude_none=True)
        # Profile values fill in what the form left out
        if current_user.room_number:
            data.setdefault("room_number", current_user.room_number)
        if current_user.tenant_code:
            data.setdefault("tenant_code", current_user.tenant_code)

        request_id = engine.submit(kind, data, current_user.id)
        return {"success": True, "id": request_id}

    # -----------------------------------------------------
    # LIST
    # -----------------------------------------------------
    @router.get("", summary=f"List {kind} requests")
    def list_requests(
        scope: Scope = Query("all", description="all, mine, pending or today (admins only)"),
        status: Optional[str] = Query(None, description="Only requests in this status"),
        current_user: CurrentUser = Depends(get_current_user),
        engine: RequestLifecycleEngine = Depends(get_engine),
    ):
        """
        Admins of this kind see every request and may narrow by scope or by
        status, not both. Students always see only their own.
        """
        if can_approve(current_user, kind):
            requests = engine.list_by_filter(kind, _admin_filter(scope, status, current_user))
            return {"success": True, list_key: requests}

        if is_admin(current_user):
            raise UnauthorizedError(f"Your role cannot view {kind} requests")
        require_submitter(current_user)
        requests = engine.list_by_filter(kind, Mine(current_user.id))
        if status:
            if not lifecycle.has_state(status):
                raise ValidationError(
                    f"Invalid {kind} status '{status}'. Must be one of: {', '.join(lifecycle.states)}"
                )
            requests = [r for r in requests if r.get("status") == status]
        return {"success": True, list_key: requests}

    # -----------------------------------------------------
    # GET ONE
    # -----------------------------------------------------
    @router.get("/{request_id}", summary=f"Get one {kind} request")
    def get_request(
        request_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        engine: RequestLifecycleEngine = Depends(get_engine),
    ):
        request = engine.get(kind, request_id)
        if not can_approve(current_user, kind) and request.get("user_id") != current_user.id:
            raise UnauthorizedError("You can only view your own requests")
        return {"success": True, "request": request}

    # -----------------------------------------------------
    # ADMIN TRANSITION
    # -----------------------------------------------------
    @router.patch("/{request_id}", summary=f"Change the status of a {kind} request")
    def transition_request(
        request_id: str,
        payload: TransitionPayload,
        current_user: CurrentUser = Depends(get_current_user),
        engine: RequestLifecycleEngine = Depends(get_engine),
    ):
        require_approver(current_user, kind)
        request = engine.transition(
            kind,
            request_id,
            payload.status,
            current_user.id,
            admin_response=payload.admin_response,
        )
        return {"success": True, "request": request}

    # -----------------------------------------------------
    # ASSIGN STAFF (maintenance, complaints)
    # -----------------------------------------------------
    if lifecycle.assignable:

        @router.patch("/{request_id}/assign", summary=f"Assign staff to a {kind} request")
        def assign_request(
            request_id: str,
            payload: AssignPayload,
            current_user: CurrentUser = Depends(get_current_user),
            engine: RequestLifecycleEngine = Depends(get_engine),
        ):
            require_approver(current_user, kind)
            request = engine.assign(kind, request_id, payload.staff_id, current_user.id)
            return {"success": True, "request": request}

    return router


complaints_router = build_request_router(
    RequestKind.complaint, "/complaints", "Complaints", ComplaintCreate, "complaints"
)
maintenance_router = build_request_router(
    RequestKind.maintenance, "/maintenance", "Maintenance", MaintenanceCreate, "requests"
)
sleepovers_router = build_request_router(
    RequestKind.sleepover, "/sleepovers", "Sleepovers", SleepoverCreate, "requests"
)
guests_router = build_request_router(
    RequestKind.guest, "/guests", "Guests", GuestVisitCreate, "guests"
)


# ============================================================
# CHECKOUT
# ============================================================
@sleepovers_router.post("/checkout", summary="Sign out the current sleepover guest")
def checkout_sleepover(
    payload: CheckoutPayload,
    current_user: CurrentUser = Depends(get_current_user),
    engine: RequestLifecycleEngine = Depends(get_engine),
):
    require_submitter(current_user)
    result = engine.checkout_sleepover(current_user.id, payload.pin)
    return {"success": True, **asdict(result)}


@guests_router.post("/{request_id}/checkout", summary="Check out a signed-in guest")
def checkout_guest(
    request_id: str,
    payload: CheckoutPayload,
    current_user: CurrentUser = Depends(get_current_user),
    engine: RequestLifecycleEngine = Depends(get_engine),
):
    """Students check out their own guests; guest admins may check out anyone's."""
    if can_approve(current_user, RequestKind.guest):
        requester_id = None
    else:
        require_submitter(current_user)
        requester_id = current_user.id

    guest = engine.checkout_guest_visit(request_id, payload.pin, requester_id=requester_id)
    return {"success": True, "request": guest}


request_routers = [complaints_router, maintenance_router, sleepovers_router, guests_router]
