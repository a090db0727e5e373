"""URL surface of the site mapped onto Streamlit page scripts."""

HOME = "/"
ADMIN_LOGIN = "/admin/login"
ADMIN_GAMES = "/admin/games"
ADMIN_RESULTS = "/admin/results"
ADMIN_TEAMS = "/admin/teams"
ADMIN_PLAYERS = "/admin/players"

ROUTES = {
    HOME: "app.py",
    ADMIN_LOGIN: "pages/1_Admin_Login.py",
    ADMIN_GAMES: "pages/2_Admin_Games.py",
    ADMIN_RESULTS: "pages/3_Admin_Results.py",
    ADMIN_TEAMS: "pages/4_Admin_Teams.py",
    ADMIN_PLAYERS: "pages/5_Admin_Players.py",
}

# /admin lands on the first admin screen
ALIASES = {"/admin": ADMIN_GAMES}

ADMIN_NAV = [
    (ADMIN_GAMES, "Games"),
    (ADMIN_RESULTS, "Results"),
    (ADMIN_TEAMS, "Teams"),
    (ADMIN_PLAYERS, "Players"),
]


def normalize(path: str) -> str:
    p = "/" + (path or "").strip().strip("/")
    return p.lower()


def canonical(path: str) -> str:
    """Known route for `path`; anything unmatched goes to the public site."""
    p = normalize(path)
    p = ALIASES.get(p, p)
    return p if p in ROUTES else HOME


def resolve(path: str) -> str:
    """Page script for `path`."""
    return ROUTES[canonical(path)]
