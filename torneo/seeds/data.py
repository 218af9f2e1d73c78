DEMO_TOURNAMENT = "Liga de los Jueves"

DEMO_DATES = [
    {
        "name": "Fecha 1",
        "teams": ["Los Pibes", "Deportivo Barrio", "La Doce", "Atlético Esquina"],
        "config": {"type": "points", "allow_tie": True, "require_all_matches": False},
    },
    {
        "name": "Fecha 2",
        "teams": ["Los Pibes", "La Doce", "Sportivo Norte", "Juventud Unida", "Deportivo Barrio"],
        "config": {"type": "wins", "allow_tie": True, "require_all_matches": True},
    },
]
