from django.apps import AppConfig

class PLBattleConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "PL_battle"
    verbose_name = "Pokémon League battles"
