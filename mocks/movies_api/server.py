"""
Mock movies API providing the catalog, detail and booking routes.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from shared.logging import get_logger


@dataclass
class Movie:
    """Catalog entry."""
    id: int
    title: str
    durationMinutes: int
    posterUrl: str
    description: str


DEFAULT_MOVIES = [
    Movie(
        id=1,
        title="Inception",
        durationMinutes=148,
        posterUrl="https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcQzyFNPbMrTQ_AUYnyBDLibVcpXDCxAl7EJpw&s",
        description="A thief who steals corporate secrets through dream-sharing tech.",
    ),
    Movie(
        id=2,
        title="Interstellar",
        durationMinutes=169,
        posterUrl="https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcSDTub_bBGszu356QIoRKefZvZ8VP1tNEzi6A&s",
        description="Explorers travel through a wormhole in space in an attempt to save humanity.",
    ),
]


class MockMoviesApiServer:
    """Mock movies API implementation."""

    def __init__(self, movies: Optional[List[Movie]] = None, port: int = 3000):
        self.port = port
        self.logger = get_logger("mock.movies_api")
        self.app = FastAPI(title="Mock Movies API", version="1.0.0")

        # In-memory catalog
        self.movies: Dict[int, Movie] = {movie.id: movie for movie in (movies or DEFAULT_MOVIES)}
        self.bookings: List[int] = []

        self._setup_routes()

    def _find(self, movie_id: str) -> Optional[Movie]:
        try:
            return self.movies.get(int(movie_id))
        except ValueError:
            return None

    def _setup_routes(self):
        """Set up mock API routes."""

        @self.app.get("/api/movies")
        async def list_movies():
            """List the whole catalog."""
            self.logger.info("GET /api/movies")
            return [asdict(movie) for movie in self.movies.values()]

        @self.app.get("/api/movies/{movie_id}")
        async def get_movie(movie_id: str):
            """Movie details."""
            self.logger.info("GET /api/movies/{id}", movie_id=movie_id)
            movie = self._find(movie_id)
            if movie is None:
                return JSONResponse(status_code=404, content={"error": "Movie not found"})
            return asdict(movie)

        @self.app.post("/api/movies/{movie_id}/book")
        async def book_movie(movie_id: str):
            """Record a (fake) booking."""
            movie = self._find(movie_id)
            if movie is None:
                return JSONResponse(status_code=404, content={"error": "Movie not found"})
            self.bookings.append(movie.id)
            self.logger.info("Booking request", movie_id=movie.id)
            return JSONResponse(status_code=201, content={"ok": True})


def create_app():
    """Create mock movies API application."""
    server = MockMoviesApiServer()
    return server.app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=3000)
