"""Round-robin pairing generation for leaguecal."""

from leaguecal.models import Pairing, Round

BYE = "__BYE__"


def rotate(order: list[str]) -> list[str]:
    """Next circle-method order: keep position 0 fixed, move the last entry to position 1."""
    if len(order) < 3:
        return list(order)
    return [order[0], order[-1]] + order[1:-1]


def pair_round(order: list[str], number: int, swap: bool = False) -> Round:
    """Pair order[i] with order[n-1-i]. Pairings with the bye sentinel become byes."""
    n = len(order)
    pairings = []
    bye_teams = []
    for i in range(n // 2):
        t1 = order[i]
        t2 = order[n - 1 - i]
        if t1 == BYE:
            bye_teams.append(t2)
        elif t2 == BYE:
            bye_teams.append(t1)
        elif swap:
            pairings.append(Pairing(t2, t1))
        else:
            pairings.append(Pairing(t1, t2))
    return Round(number=number, pairings=pairings, bye_teams=bye_teams)


def generate_round_robin(teams: list[str], double: bool = False) -> list[Round]:
    """Generate a round-robin schedule using the circle method.

    For N teams: N-1 rounds if even, N rounds with one bye each if odd.
    Home and away swap on every other round so the fixed team is not always
    at home. With double=True the whole rotation is repeated with home and
    away reversed, numbering continuing from the first leg.

    Deterministic: the same team order always yields the same rounds.
    """
    order = list(teams)
    if len(order) < 2:
        return []

    if len(order) % 2 == 1:
        order.append(BYE)
    n = len(order)

    first_leg = []
    for r in range(n - 1):
        first_leg.append(pair_round(order, r + 1, swap=(r % 2 == 1)))
        order = rotate(order)

    if not double:
        return first_leg

    second_leg = []
    for rnd in first_leg:
        second_leg.append(Round(
            number=rnd.number + len(first_leg),
            pairings=[p.reversed() for p in rnd.pairings],
            bye_teams=list(rnd.bye_teams),
        ))
    return first_leg + second_leg


def pairings_for_round(teams: list[str], round_number: int,
                       double: bool = False) -> Round:
    """Return only the given round (1-based), wrapping past the last round.

    The round keeps the requested number even when it wrapped.
    """
    rounds = generate_round_robin(teams, double=double)
    if not rounds:
        return Round(number=round_number, pairings=[], bye_teams=list(teams))
    picked = rounds[(round_number - 1) % len(rounds)]
    return Round(number=round_number, pairings=picked.pairings,
                 bye_teams=picked.bye_teams)


def verify_round_robin(rounds: list[Round], teams: list[str],
                       legs: int = 1) -> dict:
    """Verify a round-robin schedule is valid and complete.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - matchup_counts: dict of sorted (team_a, team_b) -> count
    - games_per_team: dict of team -> game count
    - byes_per_team: dict of team -> bye count
    """
    errors = []
    matchup_counts: dict[tuple[str, str], int] = {}
    games_per_team: dict[str, int] = {t: 0 for t in teams}
    byes_per_team: dict[str, int] = {t: 0 for t in teams}

    for rnd in rounds:
        teams_in_round = set()
        for p in rnd.pairings:
            if p.home == p.away:
                errors.append(f"Round {rnd.number}: {p.home} paired with itself")
            for t in (p.home, p.away):
                if t in teams_in_round:
                    errors.append(f"Round {rnd.number}: {t} appears twice")
                teams_in_round.add(t)

            key = tuple(sorted([p.home, p.away]))
            matchup_counts[key] = matchup_counts.get(key, 0) + 1
            games_per_team[p.home] = games_per_team.get(p.home, 0) + 1
            games_per_team[p.away] = games_per_team.get(p.away, 0) + 1

        for t in rnd.bye_teams:
            if any(p.involves(t) for p in rnd.pairings):
                errors.append(f"Round {rnd.number}: {t} has a bye but also plays")
            byes_per_team[t] = byes_per_team.get(t, 0) + 1

    for i, t1 in enumerate(teams):
        for t2 in teams[i + 1:]:
            key = tuple(sorted([t1, t2]))
            count = matchup_counts.get(key, 0)
            if count != legs:
                errors.append(f"{t1} vs {t2}: played {count} times (expected {legs})")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": matchup_counts,
        "games_per_team": games_per_team,
        "byes_per_team": byes_per_team,
    }
