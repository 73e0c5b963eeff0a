# movie_explorer/api/v1/system.py

from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/health")
def health_check():
    """Service health"""
    return {"status": "healthy", "service": "movie-explorer"}


@router.get("/db")
def test_db(request: Request):
    """Database connectivity"""
    try:
        request.app.state.database.ping()
        return {"status": "ok"}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Database unreachable: {str(e)}")
