from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models, transaction

from .engine.contracts import Combatant
from .engine.rules import MIN_FACTOR, STAT_MAX, STAT_MIN, TEAM_SIZE


STAT_VALIDATORS = [MinValueValidator(STAT_MIN), MaxValueValidator(STAT_MAX)]


class PokemonType(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Pokemon(models.Model):
    name = models.CharField(max_length=100)
    image = models.URLField(max_length=500)
    type = models.ForeignKey(PokemonType, on_delete=models.PROTECT, related_name="pokemon")

    power = models.IntegerField(validators=STAT_VALIDATORS)  # attack per exchange
    life = models.IntegerField(validators=STAT_VALIDATORS)   # starting health

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.type.name})"

    def to_combatant(self) -> Combatant:
        return Combatant(
            id=str(self.pk),
            name=self.name,
            image=self.image,
            power=self.power,
            life=self.life,
            type=str(self.type_id),
        )


class Weakness(models.Model):
    """
    Damage multiplier when a `type1` attacker hits a `type2` defender.
    Directional: Fire->Water and Water->Fire are separate rows.
    """
    type1 = models.ForeignKey(PokemonType, on_delete=models.CASCADE, related_name="attacking")
    type2 = models.ForeignKey(PokemonType, on_delete=models.CASCADE, related_name="defending")
    factor = models.FloatField()

    class Meta:
        unique_together = [("type1", "type2")]

    def clean(self):
        super().clean()
        if self.factor is None or self.factor < MIN_FACTOR:
            raise ValidationError(f"factor must be at least {MIN_FACTOR}")

    def __str__(self):
        return f"{self.type1} -> {self.type2}: x{self.factor}"


class Team(models.Model):
    name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name

    def pokemon_ids(self) -> list:
        return [m.pokemon_id for m in self.members.all()]

    def set_members(self, pokemon_ids: list) -> None:
        """
        Replace the roster. Order of `pokemon_ids` is the fighting order.
        """
        with transaction.atomic():
            self.members.all().delete()
            TeamMember.objects.bulk_create([
                TeamMember(team=self, pokemon_id=int(pid), slot=slot)
                for slot, pid in enumerate(pokemon_ids, start=1)
            ])


class TeamMember(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="members")
    pokemon = models.ForeignKey(Pokemon, on_delete=models.CASCADE, related_name="memberships")
    slot = models.IntegerField()  # 1..TEAM_SIZE, fighting order

    class Meta:
        unique_together = [("team", "slot")]
        ordering = ["slot"]

    def clean(self):
        if self.slot < 1 or self.slot > TEAM_SIZE:
            raise ValidationError(f"slot must be 1..{TEAM_SIZE}")

    def __str__(self):
        return f"{self.team.name} slot{self.slot}: {self.pokemon.name}"
