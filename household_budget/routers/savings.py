# household_budget/routers/savings.py
from fastapi import APIRouter, Depends, Request, status

from household_budget.deps import require_workspace, respond
from household_budget.schemas import AmountIn, SavingsGoalIn
from household_budget.workspaces import Workspace

router = APIRouter(prefix="/savings", tags=["savings"])


@router.get("")
def list_goals(ws: Workspace = Depends(require_workspace)):
    store = ws.store
    return {"goals": store.ready_settings().savings_goals, "summary": store.savings_summary()}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_goal(body: SavingsGoalIn, request: Request, ws: Workspace = Depends(require_workspace)):
    ok = ws.store.add_savings_goal(body.name, body.target_amount, body.description)
    return respond(request, ws.store, ok, "goal_added")


@router.post("/{goal_id}/deposit")
def deposit(
    goal_id: str, body: AmountIn, request: Request, ws: Workspace = Depends(require_workspace)
):
    """Add an amount to the goal (never sets the saved total directly)."""
    store = ws.store
    ok = store.update_savings_goal(goal_id, body.amount)
    answer = respond(request, store, ok, "goal_updated")
    goal = next(g for g in store.ready_settings().savings_goals if g.id == goal_id)
    if goal.completed:
        answer["message"] = store.translate("goal_completed")
    answer["goal"] = goal
    return answer


@router.delete("/{goal_id}")
def remove_goal(goal_id: str, request: Request, ws: Workspace = Depends(require_workspace)):
    ok = ws.store.remove_savings_goal(goal_id)
    return respond(request, ws.store, ok, "goal_removed")
