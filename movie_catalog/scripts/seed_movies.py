"""
Load the sample catalog. Run from project root:

  python -m movie_catalog.scripts.seed_movies          # replace all movies
  python -m movie_catalog.scripts.seed_movies --keep   # append to existing movies
"""

import argparse
import logging
import sys
from datetime import date

from sqlalchemy.orm import Session

from movie_catalog.core.config import get_settings
from movie_catalog.core.database import SessionLocal
from movie_catalog.core.logging_config import configure_logging
from movie_catalog.models import Movie
from movie_catalog.schemas.movies import MovieCreate

logger = logging.getLogger(__name__)


def _poster(seed: str) -> str:
    return f"https://picsum.photos/seed/{seed}/300/450"


SAMPLE_MOVIES: list[dict] = [
    {
        "title": "The Shawshank Redemption",
        "description": "Two imprisoned men bond over a number of years, finding solace and eventual redemption through acts of common decency.",
        "rating": 9.3,
        "duration": 142,
        "release_date": date(1994, 9, 23),
        "poster": _poster("shawshank"),
    },
    {
        "title": "The Godfather",
        "description": "The aging patriarch of an organized crime dynasty transfers control of his clandestine empire to his reluctant son.",
        "rating": 9.2,
        "duration": 175,
        "release_date": date(1972, 3, 24),
        "poster": _poster("godfather"),
    },
    {
        "title": "The Dark Knight",
        "description": "When the menace known as the Joker wreaks havoc and chaos on the people of Gotham, Batman must accept one of the greatest psychological and physical tests of his ability to fight injustice.",
        "rating": 9.0,
        "duration": 152,
        "release_date": date(2008, 7, 18),
        "poster": _poster("darkknight"),
    },
    {
        "title": "Pulp Fiction",
        "description": "The lives of two mob hitmen, a boxer, a gangster and his wife intertwine in four tales of violence and redemption.",
        "rating": 8.9,
        "duration": 154,
        "release_date": date(1994, 10, 14),
        "poster": _poster("pulpfiction"),
    },
    {
        "title": "Forrest Gump",
        "description": "The presidencies of Kennedy and Johnson, the Vietnam War, the Watergate scandal and other historical events unfold from the perspective of an Alabama man with an IQ of 75.",
        "rating": 8.8,
        "duration": 142,
        "release_date": date(1994, 7, 6),
        "poster": _poster("forrestgump"),
    },
    {
        "title": "Inception",
        "description": "A thief who steals corporate secrets through the use of dream-sharing technology is given the inverse task of planting an idea into the mind of a C.E.O.",
        "rating": 8.8,
        "duration": 148,
        "release_date": date(2010, 7, 16),
        "poster": _poster("inception"),
    },
    {
        "title": "The Matrix",
        "description": "A computer programmer discovers that reality as he knows it is a simulation created by machines, and joins a rebellion to break free.",
        "rating": 8.7,
        "duration": 136,
        "release_date": date(1999, 3, 31),
        "poster": _poster("matrix"),
    },
    {
        "title": "Goodfellas",
        "description": "The story of Henry Hill and his life in the mob, covering his relationship with his wife Karen Hill and his mob partners Jimmy Conway and Tommy DeVito.",
        "rating": 8.7,
        "duration": 146,
        "release_date": date(1990, 9, 19),
        "poster": _poster("goodfellas"),
    },
    {
        "title": "The Silence of the Lambs",
        "description": "A young FBI cadet must receive the help of an incarcerated and manipulative cannibal killer to help catch another serial killer.",
        "rating": 8.6,
        "duration": 118,
        "release_date": date(1991, 2, 14),
        "poster": _poster("silencelambs"),
    },
    {
        "title": "Se7en",
        "description": "Two detectives, a rookie and a veteran, hunt a serial killer who uses the seven deadly sins as his motives.",
        "rating": 8.6,
        "duration": 127,
        "release_date": date(1995, 9, 22),
        "poster": _poster("seven"),
    },
    {
        "title": "The Avengers",
        "description": "Earth's mightiest heroes must come together and learn to fight as a team if they are going to stop the mischievous Loki and his alien army from enslaving humanity.",
        "rating": 8.0,
        "duration": 143,
        "release_date": date(2012, 5, 4),
        "poster": _poster("avengers"),
    },
    {
        "title": "Interstellar",
        "description": "A team of explorers travel through a wormhole in space in an attempt to ensure humanity's survival.",
        "rating": 8.6,
        "duration": 169,
        "release_date": date(2014, 11, 7),
        "poster": _poster("interstellar"),
    },
]


def seed_movies(db: Session, replace: bool = True) -> int:
    """Insert SAMPLE_MOVIES (validated like API input); optionally clear the table first."""
    if replace:
        cleared = db.query(Movie).delete(synchronize_session=False)
        logger.info("Cleared existing movies: count=%s", cleared)
    rows = [Movie(**MovieCreate(**item).model_dump()) for item in SAMPLE_MOVIES]
    db.add_all(rows)
    db.commit()
    logger.info("Inserted sample movies: count=%s", len(rows))
    return len(rows)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the movie catalog with sample data.")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing movies instead of clearing the table first.",
    )
    args = parser.parse_args(argv)

    configure_logging(get_settings().LOG_LEVEL)
    db = SessionLocal()
    try:
        seed_movies(db, replace=not args.keep)
        return 0
    except Exception as e:
        db.rollback()
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
