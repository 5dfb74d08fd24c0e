import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinematch.api.schemas import EntryRequest, PreferenceList, ScalarPreferencesRequest, SessionResponse
from cinematch.exceptions import CineMatchError, FlowStateError, RequestFailure, ValidationFailure
from cinematch.flow.interaction import InteractionFlow, VALIDATION_MESSAGE
from cinematch.flow.view import DEFAULT_COVER_URL, FlowView, render_flow
from cinematch.llm.recommendation_client import RecommendationClient
from cinematch.models.preference import MoviePreference
from cinematch.models.recommendation import RecommendationResult
from cinematch.utils.config import CONFIG_PATH, load_config
from cinematch.utils.logger import get_logger

logger = get_logger(__name__)

# Process-wide state; sessions live in memory only
recommendation_client = None
cover_template = DEFAULT_COVER_URL
DEFAULT_MAX_SESSIONS = 1000
max_sessions = DEFAULT_MAX_SESSIONS
# Least recently used first; the oldest are evicted past max_sessions
sessions: "OrderedDict[str, InteractionFlow]" = OrderedDict()

ERROR_STATUS = {
    ValidationFailure: status.HTTP_422_UNPROCESSABLE_ENTITY,
    RequestFailure: status.HTTP_502_BAD_GATEWAY,
    FlowStateError: status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    global recommendation_client, cover_template, max_sessions

    config = load_config(CONFIG_PATH)
    cover_template = config["view"]["cover_url"]
    max_sessions = config["api"].get("max_sessions", DEFAULT_MAX_SESSIONS)
    if recommendation_client is None:
        logger.info(f"Loading oracle backend: {config['oracle']['backend']}")
        recommendation_client = RecommendationClient(config_path=CONFIG_PATH)
    logger.info("CineMatch API ready.")
    yield
    sessions.clear()
    logger.info("Shutting down...")


app = FastAPI(title="CineMatch AI", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_recommendation_client() -> RecommendationClient:
    if recommendation_client is None:
        raise HTTPException(status_code=503, detail="Recommendation client not loaded")
    return recommendation_client


def get_flow(session_id: str) -> InteractionFlow:
    try:
        sessions.move_to_end(session_id)
        return sessions[session_id]
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found") from None


def view_of(flow: InteractionFlow) -> FlowView:
    return render_flow(flow, cover_template)


def flow_error(flow: InteractionFlow, error: CineMatchError) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST),
        content={"detail": str(error), "view": view_of(flow).model_dump(by_alias=True)},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(client: RecommendationClient = Depends(get_recommendation_client)):
    session_id = uuid.uuid4().hex
    flow = InteractionFlow(client)
    sessions[session_id] = flow
    while len(sessions) > max_sessions:
        evicted, _ = sessions.popitem(last=False)
        logger.info(f"Session {evicted} evicted (limit {max_sessions})")
    logger.info(f"Session {session_id} started")
    return SessionResponse(session_id=session_id, view=view_of(flow))


@app.get("/sessions/{session_id}", response_model=FlowView)
def get_session(flow: InteractionFlow = Depends(get_flow)):
    return view_of(flow)


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, flow: InteractionFlow = Depends(get_flow)):
    sessions.pop(session_id, None)
    logger.info(f"Session {session_id} discarded")


@app.post("/sessions/{session_id}/preferences/{field}", response_model=FlowView)
def add_preference(field: PreferenceList, request: EntryRequest, flow: InteractionFlow = Depends(get_flow)):
    try:
        flow.add(field.value, request.value)
    except FlowStateError as e:
        return flow_error(flow, e)
    return view_of(flow)


@app.post("/sessions/{session_id}/preferences/{field}/remove", response_model=FlowView)
def remove_preference(field: PreferenceList, request: EntryRequest, flow: InteractionFlow = Depends(get_flow)):
    try:
        flow.remove(field.value, request.value)
    except FlowStateError as e:
        return flow_error(flow, e)
    return view_of(flow)


@app.patch("/sessions/{session_id}/preferences", response_model=FlowView)
def update_preferences(request: ScalarPreferencesRequest, flow: InteractionFlow = Depends(get_flow)):
    try:
        flow.set_scalars(
            language=request.language,
            year_range=request.year_range,
            mood=request.mood,
        )
    except FlowStateError as e:
        return flow_error(flow, e)
    return view_of(flow)


@app.post("/sessions/{session_id}/submit", response_model=FlowView)
def submit(flow: InteractionFlow = Depends(get_flow)):
    # Sync endpoint: the oracle call blocks a worker thread, not the event loop
    try:
        flow.submit()
    except CineMatchError as e:
        return flow_error(flow, e)
    return view_of(flow)


@app.post("/sessions/{session_id}/restart", response_model=FlowView)
def restart(flow: InteractionFlow = Depends(get_flow)):
    try:
        flow.restart()
    except FlowStateError as e:
        return flow_error(flow, e)
    return view_of(flow)


@app.post("/recommend", response_model=RecommendationResult)
def recommend(prefs: MoviePreference, client: RecommendationClient = Depends(get_recommendation_client)):
    if not prefs.has_core_preference():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=VALIDATION_MESSAGE)
    try:
        return client.get_recommendations(prefs)
    except RequestFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


if __name__ == "__main__":
    api_config = load_config(CONFIG_PATH)["api"]
    uvicorn.run("cinematch.api.main:app", host=api_config["host"], port=api_config["port"], reload=True)
