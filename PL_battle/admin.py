from django.contrib import admin
from django.core.exceptions import ValidationError
from django.forms.models import BaseInlineFormSet

from .engine.rules import TEAM_SIZE
from .models import Pokemon, PokemonType, Team, TeamMember, Weakness


# -----------------------------
# Helpers
# -----------------------------

class TeamMemberInlineFormSet(BaseInlineFormSet):
    """
    Enforce:
    - slot is within 1..TEAM_SIZE and unique (also enforced by unique_together)
    - the same pokemon is not picked twice
    - the roster is exactly TEAM_SIZE long
    """
    def clean(self):
        super().clean()

        # inline forms can be empty/deleted
        forms = [
            f for f in self.forms
            if hasattr(f, "cleaned_data")
            and f.cleaned_data
            and not f.cleaned_data.get("DELETE", False)
        ]

        slots = []
        picked = []
        for f in forms:
            slot = f.cleaned_data.get("slot")
            if slot is not None:
                if slot < 1 or slot > TEAM_SIZE:
                    raise ValidationError(f"Team slot must be between 1 and {TEAM_SIZE}.")
                slots.append(slot)
            pokemon = f.cleaned_data.get("pokemon")
            if pokemon is not None:
                picked.append(pokemon.pk)

        if len(slots) != len(set(slots)):
            raise ValidationError(f"Duplicate team slots detected. Each slot (1-{TEAM_SIZE}) must be unique.")

        if len(picked) != len(set(picked)):
            raise ValidationError("Duplicate Pokémon selected.")

        if len(forms) != TEAM_SIZE:
            raise ValidationError(f"Team must contain exactly {TEAM_SIZE} Pokémon, but you selected {len(forms)}.")


# -----------------------------
# Type Admin
# -----------------------------

@admin.register(PokemonType)
class PokemonTypeAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Weakness)
class WeaknessAdmin(admin.ModelAdmin):
    list_display = ("type1", "type2", "factor")
    list_filter = ("type1", "type2")
    autocomplete_fields = ("type1", "type2")


# -----------------------------
# Pokemon Admin
# -----------------------------

@admin.register(Pokemon)
class PokemonAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "power", "life")
    list_filter = ("type",)
    search_fields = ("name",)
    autocomplete_fields = ("type",)


# -----------------------------
# Team Admin (with inline roster)
# -----------------------------

class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    formset = TeamMemberInlineFormSet
    extra = 0
    fields = ("slot", "pokemon")
    autocomplete_fields = ("pokemon",)
    ordering = ("slot",)


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)

    inlines = [TeamMemberInline]
