import queue

from flask import Blueprint, request, jsonify, Response, current_app

from torneo.events import event_bus
from torneo.schemas import (
    TournamentSchema,
    TournamentSummarySchema,
    CreateTournamentSchema,
    CreateTiebreakerSchema,
    FinalResultSchema,
    TournamentDateSchema,
    CreateTournamentDateSchema,
    MatchSchema,
    CreateMatchSchema,
    SubmitResultSchema,
    FixturePreviewSchema,
    ValidatePairingsSchema,
    StandingSchema,
)
from torneo.services.tournament_service import (
    create_tournament,
    get_tournament,
    list_tournaments,
    delete_tournament,
    get_tournament_standings,
    complete_tournament,
)
from torneo.services.date_service import (
    add_tournament_date,
    list_dates,
    generate_date_fixture,
    close_tournament_date,
    get_date_standings,
)
from torneo.services.match_service import (
    apply_result,
    add_match_to_date,
    create_tiebreaker,
)
from torneo.services.fixtures import generate_fixture, validate_pairings

api_bp = Blueprint("api", __name__)

# ── Schema instances ─────────────────────────────────────────────────────────
tournament_schema = TournamentSchema()
tournament_summaries_schema = TournamentSummarySchema(many=True)
create_tournament_schema = CreateTournamentSchema()
create_tiebreaker_schema = CreateTiebreakerSchema()
final_result_schema = FinalResultSchema()

date_schema = TournamentDateSchema()
dates_schema = TournamentDateSchema(many=True)
create_date_schema = CreateTournamentDateSchema()

match_schema = MatchSchema()
matches_schema = MatchSchema(many=True)
create_match_schema = CreateMatchSchema()
submit_result_schema = SubmitResultSchema()

fixture_preview_schema = FixturePreviewSchema()
validate_pairings_schema = ValidatePairingsSchema()

standings_schema = StandingSchema(many=True)


def _json_body():
    return request.get_json(silent=True) or {}


# ─── Tournaments ──────────────────────────────────────────────────────────────

@api_bp.route("/tournaments", methods=["GET"])
def get_tournaments():
    return jsonify({"tournaments": tournament_summaries_schema.dump(list_tournaments())}), 200


@api_bp.route("/tournaments", methods=["POST"])
def create_tournament_route():
    data = create_tournament_schema.load(_json_body())
    tournament = create_tournament(data["name"], data["config"])
    return jsonify({"tournament": tournament_schema.dump(tournament)}), 201


@api_bp.route("/tournaments/<int:tournament_id>", methods=["GET"])
def get_tournament_route(tournament_id):
    tournament = get_tournament(tournament_id)
    return jsonify({"tournament": tournament_schema.dump(tournament)}), 200


@api_bp.route("/tournaments/<int:tournament_id>", methods=["DELETE"])
def delete_tournament_route(tournament_id):
    delete_tournament(tournament_id)
    return jsonify({"message": "Tournament deleted"}), 200


@api_bp.route("/tournaments/<int:tournament_id>/standings", methods=["GET"])
def tournament_standings_route(tournament_id):
    standings = get_tournament_standings(tournament_id)
    return jsonify({"standings": standings_schema.dump(standings)}), 200


@api_bp.route("/tournaments/<int:tournament_id>/complete", methods=["POST"])
def complete_tournament_route(tournament_id):
    outcome = complete_tournament(tournament_id)
    return jsonify({"result": final_result_schema.dump(outcome)}), 200


@api_bp.route("/tournaments/<int:tournament_id>/tiebreaker", methods=["POST"])
def create_tiebreaker_route(tournament_id):
    data = create_tiebreaker_schema.load(_json_body())
    match = create_tiebreaker(tournament_id, data["team1"], data["team2"])
    return jsonify({"match": match_schema.dump(match)}), 201


# ─── Dates ────────────────────────────────────────────────────────────────────

@api_bp.route("/tournaments/<int:tournament_id>/dates", methods=["GET"])
def get_dates_route(tournament_id):
    dates = list_dates(tournament_id)
    return jsonify({"dates": dates_schema.dump(dates)}), 200


@api_bp.route("/tournaments/<int:tournament_id>/dates", methods=["POST"])
def add_date_route(tournament_id):
    data = create_date_schema.load(_json_body())
    date = add_tournament_date(tournament_id, data["name"], data["teams"], data["config"])
    return jsonify({"date": date_schema.dump(date)}), 201


@api_bp.route("/tournaments/<int:tournament_id>/dates/<int:date_id>/close", methods=["POST"])
def close_date_route(tournament_id, date_id):
    date = close_tournament_date(tournament_id, date_id)
    return jsonify({"date": date_schema.dump(date)}), 200


@api_bp.route("/dates/<int:date_id>/generate-fixture", methods=["POST"])
def generate_fixture_route(date_id):
    matches = generate_date_fixture(date_id)
    return jsonify({
        "message": "Fixture generated",
        "match_count": len(matches),
        "matches": matches_schema.dump(matches),
    }), 201


@api_bp.route("/dates/<int:date_id>/matches", methods=["POST"])
def add_match_route(date_id):
    data = create_match_schema.load(_json_body())
    match = add_match_to_date(date_id, data["team1"], data["team2"])
    return jsonify({"match": match_schema.dump(match)}), 201


@api_bp.route("/dates/<int:date_id>/standings", methods=["GET"])
def date_standings_route(date_id):
    standings = get_date_standings(date_id)
    return jsonify({"standings": standings_schema.dump(standings)}), 200


# ─── Matches ──────────────────────────────────────────────────────────────────

@api_bp.route("/matches/<int:match_id>/result", methods=["POST"])
def submit_result_route(match_id):
    data = submit_result_schema.load(_json_body())
    match, standings = apply_result(
        match_id, data["team1_score"], data["team2_score"], data["result"]
    )
    return jsonify({
        "match": match_schema.dump(match),
        "standings": standings_schema.dump(standings),
    }), 200


# ─── Fixture tools ────────────────────────────────────────────────────────────

@api_bp.route("/fixtures/preview", methods=["POST"])
def preview_fixture_route():
    data = fixture_preview_schema.load(_json_body())
    return jsonify({"pairings": generate_fixture(data["teams"], data["block"])}), 200


@api_bp.route("/fixtures/validate", methods=["POST"])
def validate_pairings_route():
    data = validate_pairings_schema.load(_json_body())
    return jsonify(validate_pairings(data["teams"], data["pairings"])), 200


# ─── SSE Events ──────────────────────────────────────────────────────────

@api_bp.route("/events/stream", methods=["GET"])
def event_stream():
    tournament_id = request.args.get("tournament_id", type=int)
    keepalive = current_app.config["SSE_KEEPALIVE_SECONDS"]

    def generate():
        q = event_bus.subscribe(tournament_id)
        try:
            while True:
                try:
                    msg = q.get(timeout=keepalive)
                    yield f"data: {msg}\n\n"
                except queue.Empty:
                    yield ": keepalive\n\n"
        finally:
            event_bus.unsubscribe(q)

    return Response(
        generate(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
