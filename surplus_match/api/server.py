"""FastAPI server for the surplus food matching engine."""

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from surplus_match.data_layer.dataset_loader import validate_food_record, validate_person_record
from surplus_match.data_layer.exceptions import MissingFieldError
from surplus_match.data_layer.models import FoodItem, HandlingConditions, StorageConditions
from surplus_match.matching.session import MatchingSession
from surplus_match.output.formatters import format_match_refs, format_result_json


class FoodRequest(BaseModel):
    name: str
    restaurant_name: str
    type: str
    preparation_time: float
    temperature: float
    location: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None


class PersonRequest(BaseModel):
    name: str
    location: str
    preferred_food_type: str = "any"
    max_distance: Optional[float] = None
    dietary_restrictions: List[str] = Field(default_factory=list)


class HandlingRequest(BaseModel):
    staff_trained: bool = True
    protocols_followed: bool = True
    gloves_used: bool = True
    clean_surfaces: bool = True


class StorageRequest(BaseModel):
    humidity: float = 50.0
    contamination_risk: str = "low"
    proper_containers: bool = True
    clean_environment: bool = True


class SafetyScoreRequest(BaseModel):
    type: str
    preparation_time: float
    temperature: float
    handling: HandlingRequest = Field(default_factory=HandlingRequest)
    storage: StorageRequest = Field(default_factory=StorageRequest)


class MatchRunRequest(BaseModel):
    claim: bool = False


def create_app(session: Optional[MatchingSession] = None) -> FastAPI:
    """Build the HTTP app around one in-memory matching session."""
    app = FastAPI(title="Surplus Food Matcher API")
    app.state.session = session or MatchingSession()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Local development
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def current() -> MatchingSession:
        return app.state.session

    @app.post("/api/food")
    def add_food(request: FoodRequest) -> Dict[str, Any]:
        s = current()
        try:
            record = validate_food_record(request.model_dump(exclude_none=True))
        except MissingFieldError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        item = s.food_registry.add(record)
        s.food_registry.update_safety_score(item.id, s.calculator, s.handling, s.storage)
        return item.to_display_dict()

    @app.get("/api/food")
    def list_food() -> List[Dict[str, Any]]:
        return [item.to_display_dict() for item in current().food_registry.list_available()]

    @app.delete("/api/food/{food_id}")
    def remove_food(food_id: str) -> Dict[str, bool]:
        if not current().food_registry.remove(food_id):
            raise HTTPException(status_code=404, detail=f"Food item '{food_id}' not found")
        return {"removed": True}

    @app.post("/api/people")
    def add_person(request: PersonRequest) -> Dict[str, Any]:
        try:
            record = validate_person_record(request.model_dump(exclude_none=True))
        except MissingFieldError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return current().person_registry.add(record).to_display_dict()

    @app.get("/api/people")
    def list_people() -> List[Dict[str, Any]]:
        return [p.to_display_dict() for p in current().person_registry.list_active()]

    @app.post("/api/people/{person_id}/deactivate")
    def deactivate_person(person_id: str) -> Dict[str, Any]:
        registry = current().person_registry
        if not registry.deactivate(person_id):
            raise HTTPException(status_code=404, detail=f"Person '{person_id}' not found")
        return registry.get(person_id).to_display_dict()

    @app.post("/api/people/{person_id}/reactivate")
    def reactivate_person(person_id: str) -> Dict[str, Any]:
        registry = current().person_registry
        if not registry.reactivate(person_id):
            raise HTTPException(status_code=404, detail=f"Person '{person_id}' not found")
        return registry.get(person_id).to_display_dict()

    @app.post("/api/safety-score")
    def safety_score(request: SafetyScoreRequest) -> Dict[str, Any]:
        probe = FoodItem(
            id="probe",
            name="probe",
            restaurant_name="",
            type=request.type,
            preparation_time=request.preparation_time,
            temperature=request.temperature,
        )
        score = current().calculator.calculate_safety_score(
            probe,
            HandlingConditions(**request.handling.model_dump()),
            StorageConditions(**request.storage.model_dump()),
        )
        return score.to_dict()

    @app.post("/api/matches")
    def run_matching(request: Optional[MatchRunRequest] = None) -> Dict[str, Any]:
        claim = request.claim if request is not None else False
        return format_result_json(current().run(claim=claim))

    @app.get("/api/matches")
    def list_matches() -> List[Dict[str, str]]:
        return format_match_refs(current().matcher.get_matches())

    @app.delete("/api/matches/{food_id}/{person_id}")
    def remove_match(food_id: str, person_id: str) -> Dict[str, bool]:
        s = current()
        if not s.matcher.remove_match(food_id, person_id, s.person_registry):
            raise HTTPException(status_code=404, detail="No such match")
        return {"removed": True}

    @app.get("/api/stats")
    def stats() -> Dict[str, Any]:
        s = current()
        return {
            "food": asdict(s.food_registry.get_stats()),
            "people": asdict(s.person_registry.get_stats()),
            "matching": asdict(s.matcher.get_stats(s.food_registry, s.person_registry)),
            "suggestions": s.matcher.get_improvement_suggestions(
                s.food_registry, s.person_registry
            ),
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
