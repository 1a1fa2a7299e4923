from rest_framework import serializers

from .engine.rules import MIN_FACTOR, RuleError, validate_stats, validate_team
from .loaders import total_power
from .models import Pokemon, PokemonType, Team, Weakness


class PokemonTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = PokemonType
        fields = "__all__"


class PokemonTypeNameSerializer(serializers.ModelSerializer):
    class Meta:
        model = PokemonType
        fields = ("name",)


class PokemonSerializer(serializers.ModelSerializer):
    pokemon_type = PokemonTypeNameSerializer(source="type", read_only=True)

    class Meta:
        model = Pokemon
        fields = ("id", "name", "image", "power", "life", "type", "pokemon_type")

    def validate(self, attrs):
        try:
            validate_stats(attrs.get("power"), attrs.get("life"))
        except RuleError as e:
            raise serializers.ValidationError({e.details["field"]: e.message})
        return attrs


class WeaknessSerializer(serializers.ModelSerializer):
    class Meta:
        model = Weakness
        fields = ("id", "type1", "type2", "factor")

    def validate_factor(self, value):
        if value < MIN_FACTOR:
            raise serializers.ValidationError(f"factor must be at least {MIN_FACTOR}")
        return value


class TeamSerializer(serializers.ModelSerializer):
    pokemon_ids = serializers.ListField(child=serializers.IntegerField())
    total_power = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = ("id", "name", "pokemon_ids", "created_at", "total_power")
        read_only_fields = ("created_at",)

    def validate(self, attrs):
        name = attrs.get("name", getattr(self.instance, "name", ""))
        pokemon_ids = attrs.get("pokemon_ids")
        if pokemon_ids is None and self.instance is not None:
            pokemon_ids = self.instance.pokemon_ids()

        known = Pokemon.objects.filter(pk__in=pokemon_ids or []).values_list("pk", flat=True)
        try:
            validate_team(name, pokemon_ids, known)
        except RuleError as e:
            field = "name" if e.code == "MISSING_NAME" else "pokemon_ids"
            raise serializers.ValidationError({field: e.message})
        return attrs

    def get_total_power(self, obj):
        return total_power([m.pokemon.to_combatant() for m in obj.members.all()])

    def create(self, validated_data):
        pokemon_ids = validated_data.pop("pokemon_ids")
        team = Team.objects.create(**validated_data)
        team.set_members(pokemon_ids)
        return team

    def update(self, instance, validated_data):
        pokemon_ids = validated_data.pop("pokemon_ids", None)
        instance.name = validated_data.get("name", instance.name)
        instance.save(update_fields=["name"])
        if pokemon_ids is not None:
            instance.set_members(pokemon_ids)
        return instance


class BattleRequestSerializer(serializers.Serializer):
    teamAId = serializers.CharField()
    teamBId = serializers.CharField()
