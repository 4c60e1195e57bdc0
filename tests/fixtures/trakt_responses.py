"""
Mock Trakt API responses for testing.

Realistic payloads from the Trakt API v2 for detail, images and list endpoints.
These fixtures are used with respx to mock httpx calls in tests.
"""

TRAKT_BASE_URL = "https://api.trakt.tv"

# GET /movies/tron-legacy-2010
TRAKT_MOVIE_RESPONSE = {
    "title": "TRON: Legacy",
    "year": 2010,
    "ids": {
        "trakt": 1,
        "slug": "tron-legacy-2010",
        "imdb": "tt1104001",
        "tmdb": 20526,
    },
}

TRAKT_MOVIE_IMAGES = {
    "fanart": ["walter-r2.trakt.tv/images/movies/000/000/001/fanarts/medium/7f6d2b8b1e.jpg"],
    "poster": ["walter-r2.trakt.tv/images/movies/000/000/001/posters/thumb/5c2dd1b0ea.jpg"],
}

# GET /movies/tron-legacy-2010?extended=images
TRAKT_MOVIE_IMAGES_RESPONSE = {**TRAKT_MOVIE_RESPONSE, "images": TRAKT_MOVIE_IMAGES}

# GET /shows/game-of-thrones
TRAKT_SHOW_RESPONSE = {
    "title": "Game of Thrones",
    "year": 2011,
    "ids": {
        "trakt": 1390,
        "slug": "game-of-thrones",
        "tvdb": 121361,
        "imdb": "tt0944947",
        "tmdb": 1399,
    },
}


def make_trending_movies(count: int = 20, start_id: int = 100) -> list[dict]:
    """GET /movies/trending : elements enveloppes {watchers, movie}."""
    return [
        {
            "watchers": 50 - i,
            "movie": {
                "title": f"Movie {start_id + i}",
                "year": 2020 + (i % 5),
                "ids": {
                    "trakt": start_id + i,
                    "slug": f"movie-{start_id + i}",
                    "imdb": f"tt{9000000 + start_id + i}",
                    "tmdb": 500000 + start_id + i,
                },
            },
        }
        for i in range(count)
    ]


# GET /shows/popular : elements nus
TRAKT_POPULAR_SHOWS_RESPONSE = [
    {
        "title": "Breaking Bad",
        "year": 2008,
        "first_aired": "2008-01-20T02:00:00.000Z",
        "ids": {"trakt": 1388, "slug": "breaking-bad", "tvdb": 81189},
    },
    {
        "title": "The Walking Dead",
        "year": 2010,
        "first_aired": "2010-10-31T07:00:00.000Z",
        "ids": {"trakt": 1393, "slug": "the-walking-dead", "tvdb": 153021},
    },
]

# GET /search/movie?query=tron
TRAKT_SEARCH_RESPONSE = [
    {"type": "movie", "score": 26.019499, "movie": TRAKT_MOVIE_RESPONSE},
]
