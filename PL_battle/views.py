import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .engine.battle import (
    battle_log_to_dicts,
    combatants_to_dicts,
    simulate,
    summarize_battle,
)
from .engine.rules import DataUnavailable, InputNotFound, RuleError
from .loaders import list_teams, load_battle_inputs
from .models import Pokemon, PokemonType, Team, Weakness
from .serializers import (
    BattleRequestSerializer,
    PokemonSerializer,
    PokemonTypeSerializer,
    TeamSerializer,
    WeaknessSerializer,
)

logger = logging.getLogger(__name__)


def _rule_error_response(e: RuleError) -> Response:
    if isinstance(e, InputNotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, DataUnavailable):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({"ok": False, "error": e.message, "code": e.code}, status=code)


def _storage_error_response(msg: str) -> Response:
    return Response(
        {"ok": False, "error": msg, "code": "DATA_UNAVAILABLE"},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


def _invalid_response(serializer) -> Response:
    return Response(
        {"ok": False, "error": "Invalid request.", "code": "INVALID_REQUEST", "details": serializer.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


# -----------------------------
# Types / weakness
# -----------------------------

@api_view(["GET"])
@permission_classes([AllowAny])
def type_list(request):
    try:
        types = list(PokemonType.objects.order_by("name"))
    except DatabaseError:
        logger.exception("Error fetching types")
        return _storage_error_response("Failed to fetch types")
    return Response(PokemonTypeSerializer(types, many=True).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def weakness_list(request):
    try:
        rows = list(Weakness.objects.order_by("type1__name", "type2__name"))
    except DatabaseError:
        logger.exception("Error fetching weakness data")
        return _storage_error_response("Could not fetch weakness data")
    return Response(WeaknessSerializer(rows, many=True).data)


# -----------------------------
# Pokemon
# -----------------------------

@api_view(["GET", "POST"])
@permission_classes([AllowAny])
def pokemon_list(request):
    if request.method == "GET":
        try:
            pokemon = list(Pokemon.objects.select_related("type").order_by("name"))
        except DatabaseError:
            logger.exception("Error fetching Pokémon")
            return _storage_error_response("Failed to fetch Pokémon")
        return Response(PokemonSerializer(pokemon, many=True).data)

    serializer = PokemonSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid_response(serializer)
    try:
        serializer.save()
    except DatabaseError:
        logger.exception("Error creating Pokémon")
        return _storage_error_response("Failed to create Pokémon")
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(["GET", "PUT", "DELETE"])
@permission_classes([AllowAny])
def pokemon_detail(request, pk):
    try:
        pokemon = Pokemon.objects.select_related("type").filter(pk=pk).first()
    except DatabaseError:
        logger.exception("Error fetching Pokémon %s", pk)
        return _storage_error_response("Failed to fetch Pokémon")
    if pokemon is None:
        return Response({"ok": False, "error": "Pokémon not found", "code": "INPUT_NOT_FOUND"}, status=404)

    if request.method == "GET":
        return Response(PokemonSerializer(pokemon).data)

    if request.method == "DELETE":
        try:
            pokemon.delete()
        except DatabaseError:
            logger.exception("Error deleting Pokémon %s", pk)
            return _storage_error_response("Failed to delete Pokémon")
        return Response({"message": "Pokémon deleted successfully"})

    serializer = PokemonSerializer(pokemon, data=request.data, partial=True)
    if not serializer.is_valid():
        return _invalid_response(serializer)
    try:
        serializer.save()
    except DatabaseError:
        logger.exception("Error updating Pokémon %s", pk)
        return _storage_error_response("Failed to update Pokémon")
    return Response(serializer.data)


# -----------------------------
# Teams
# -----------------------------

@api_view(["GET", "POST"])
@permission_classes([AllowAny])
def team_list(request):
    if request.method == "GET":
        try:
            teams = list_teams()
        except RuleError as e:
            return _rule_error_response(e)
        return Response(TeamSerializer(teams, many=True).data)

    serializer = TeamSerializer(data=request.data)
    try:
        if not serializer.is_valid():
            return _invalid_response(serializer)
        team = serializer.save()
    except DatabaseError:
        logger.exception("Error creating team")
        return _storage_error_response("Failed to create team")
    logger.info("team %s created (%s)", team.pk, team.name)
    return Response({"id": team.pk}, status=status.HTTP_201_CREATED)


@api_view(["PATCH", "DELETE"])
@permission_classes([AllowAny])
def team_detail(request, pk):
    try:
        team = Team.objects.filter(pk=pk).first()
    except DatabaseError:
        logger.exception("Error fetching team %s", pk)
        return _storage_error_response("Failed to fetch team")
    if team is None:
        return Response({"ok": False, "error": "Team not found", "code": "INPUT_NOT_FOUND"}, status=404)

    if request.method == "DELETE":
        try:
            team.delete()
        except DatabaseError:
            logger.exception("Error deleting team %s", pk)
            return _storage_error_response("Failed to delete team")
        return Response({"success": True})

    serializer = TeamSerializer(team, data=request.data, partial=True)
    try:
        if not serializer.is_valid():
            return _invalid_response(serializer)
        serializer.save()
    except DatabaseError:
        logger.exception("Error updating team %s", pk)
        return _storage_error_response("Failed to update team")
    return Response({"success": True})


# -----------------------------
# Battle
# -----------------------------

@api_view(["POST"])
@permission_classes([AllowAny])
def battle(request):
    req = BattleRequestSerializer(data=request.data)
    if not req.is_valid():
        return _invalid_response(req)

    team_a_id = req.validated_data["teamAId"]
    team_b_id = req.validated_data["teamBId"]

    try:
        inputs = load_battle_inputs(team_a_id, team_b_id)
    except RuleError as e:
        logger.warning("battle %s vs %s rejected: %s (%s)", team_a_id, team_b_id, e.message, e.code)
        return _rule_error_response(e)

    result = simulate(
        inputs.team_a.combatants,
        inputs.team_b.combatants,
        inputs.effectiveness,
        team_a_id=inputs.team_a.id,
        team_b_id=inputs.team_b.id,
    )
    logger.info("battle %s vs %s: %s", inputs.team_a.id, inputs.team_b.id, summarize_battle(result))

    return Response({
        "battleLog": battle_log_to_dicts(result),
        "teamA": {"name": inputs.team_a.name, "pokemons": combatants_to_dicts(inputs.team_a.combatants)},
        "teamB": {"name": inputs.team_b.name, "pokemons": combatants_to_dicts(inputs.team_b.combatants)},
        "winner": result.winner,
    })
