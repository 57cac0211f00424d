"""FastAPI server exposing the wardrobe views over HTTP."""

from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from tools.geolocation import Coordinates, StaticGeolocator
from wardrobe_app.app import View, WardrobeApp

_ERROR_STATUS = {
    "configuration": 503,
    "transport": 502,
    "capability": 501,
    "permission": 403,
    "precondition": 409,
    "storage": 500,
    "invalid_input": 422,
    "not_found": 404,
}


class CaptureRequest(BaseModel):
    """A photo as a data URI (or bare base64 JPEG)."""

    image: str = Field(..., min_length=1, description="data:image/...;base64,... payload")


class WeatherUpdate(BaseModel):
    """Manual weather entry; omitted fields keep their value."""

    location: str | None = None
    temperature: float | None = None
    condition: str | None = None


class LocateRequest(BaseModel):
    """Device coordinates; when omitted the server's configured source is used."""

    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


def _as_data_uri(image: str) -> str:
    return image if image.startswith("data:") else f"data:image/jpeg;base64,{image}"


def _unwrap(response: dict) -> dict:
    if response.get("status") == "error":
        raise HTTPException(status_code=_ERROR_STATUS.get(response.get("kind"), 400), detail=response)
    return response


def create_app(wardrobe: WardrobeApp | None = None) -> FastAPI:
    """Build the ASGI app around a WardrobeApp instance."""

    wardrobe = wardrobe or WardrobeApp()
    app = FastAPI(title="Wardrobe AI", version="0.1.0")
    app.state.wardrobe = wardrobe

    @app.get("/healthz")
    def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "wardrobe-ai",
            "environment": wardrobe.config.environment or "local",
            "model": wardrobe.config.model,
            "items": len(wardrobe.state),
        }

    @app.get("/categories")
    def categories() -> list:
        return wardrobe.catalog.categories()

    @app.get("/items")
    def list_items(category: str = "ALL") -> dict:
        try:
            wardrobe.catalog.set_filter(category)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return wardrobe.catalog.render()

    @app.post("/items/analyze")
    def analyze_item(request: CaptureRequest) -> dict:
        """Classify a photo without saving it."""

        session = wardrobe.open_capture()
        session.load_image(_as_data_uri(request.image))
        return _unwrap(session.analyze())

    @app.post("/items", status_code=201)
    def add_item(request: CaptureRequest) -> dict:
        """Classify a photo and save it as a new item."""

        session = wardrobe.open_capture()
        session.load_image(_as_data_uri(request.image))
        _unwrap(session.analyze())
        return _unwrap(session.save())

    @app.delete("/items/{item_id}")
    def delete_item(item_id: str) -> dict:
        return _unwrap(wardrobe.catalog.delete(item_id))

    @app.get("/matcher")
    def matcher_pair() -> dict:
        return wardrobe.matcher.pair()

    @app.post("/matcher/{slot}/{direction}")
    def matcher_move(slot: Literal["top", "bottom"], direction: Literal["next", "previous"]) -> dict:
        return wardrobe.matcher.move(slot, direction)

    @app.post("/matcher/randomize")
    def matcher_randomize() -> dict:
        return wardrobe.matcher.randomize()

    @app.get("/weather")
    def get_weather() -> dict:
        return wardrobe.assistant.render()

    @app.put("/weather")
    def put_weather(update: WeatherUpdate) -> dict:
        return _unwrap(
            wardrobe.assistant.update_weather(
                location=update.location,
                temperature=update.temperature,
                condition=update.condition,
            )
        )

    @app.post("/weather/locate")
    def locate_weather(request: LocateRequest | None = None) -> dict:
        if request is None or (request.latitude is None and request.longitude is None):
            return _unwrap(wardrobe.assistant.locate())
        if request.latitude is None or request.longitude is None:
            raise HTTPException(status_code=422, detail="Send both latitude and longitude.")
        device = StaticGeolocator(Coordinates(request.latitude, request.longitude))
        return _unwrap(wardrobe.assistant.locate(device))

    @app.post("/recommendations")
    def recommend() -> dict:
        return _unwrap(wardrobe.assistant.recommend())

    @app.post("/navigate/{view}")
    def navigate(view: View) -> dict:
        return {"view": wardrobe.navigate(view).value}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:create_app", factory=True, host="0.0.0.0", port=int("8080"), reload=False)
