

DEFAULT_EXERCISES = [
    {"id": "def_01", "name": "Supino Reto com Barra", "muscleGroup": "Peitoral", "defaultSets": 4, "defaultReps": "8-12", "defaultWeight": 20},
    {"id": "def_02", "name": "Supino Inclinado com Halteres", "muscleGroup": "Peitoral", "defaultSets": 3, "defaultReps": "10-12", "defaultWeight": 14},
    {"id": "def_03", "name": "Crucifixo Máquina (Peck Deck)", "muscleGroup": "Peitoral", "defaultSets": 3, "defaultReps": "12-15", "defaultWeight": 30},
    {"id": "def_04", "name": "Puxada Alta (Polia)", "muscleGroup": "Costas", "defaultSets": 4, "defaultReps": "10-12", "defaultWeight": 40},
    {"id": "def_05", "name": "Remada Curvada", "muscleGroup": "Costas", "defaultSets": 4, "defaultReps": "8-10", "defaultWeight": 30},
    {"id": "def_06", "name": "Barra Fixa (Graviton)", "muscleGroup": "Costas", "defaultSets": 3, "defaultReps": "Falha", "defaultWeight": 0},
    {"id": "def_07", "name": "Agachamento Livre", "muscleGroup": "Pernas", "defaultSets": 4, "defaultReps": "8-10", "defaultWeight": 20},
    {"id": "def_08", "name": "Leg Press 45º", "muscleGroup": "Pernas", "defaultSets": 4, "defaultReps": "10-12", "defaultWeight": 80},
    {"id": "def_09", "name": "Cadeira Extensora", "muscleGroup": "Pernas", "defaultSets": 3, "defaultReps": "12-15", "defaultWeight": 30},
    {"id": "def_10", "name": "Mesa Flexora", "muscleGroup": "Pernas", "defaultSets": 3, "defaultReps": "12-15", "defaultWeight": 30},
    {"id": "def_11", "name": "Levantamento Terra", "muscleGroup": "Posterior/Costas", "defaultSets": 3, "defaultReps": "6-8", "defaultWeight": 60},
    {"id": "def_12", "name": "Desenvolvimento com Halteres", "muscleGroup": "Ombros", "defaultSets": 4, "defaultReps": "10-12", "defaultWeight": 12},
    {"id": "def_13", "name": "Elevação Lateral", "muscleGroup": "Ombros", "defaultSets": 4, "defaultReps": "12-15", "defaultWeight": 8},
    {"id": "def_14", "name": "Rosca Direta (Barra W)", "muscleGroup": "Bíceps", "defaultSets": 3, "defaultReps": "10-12", "defaultWeight": 10},
    {"id": "def_15", "name": "Rosca Martelo", "muscleGroup": "Bíceps", "defaultSets": 3, "defaultReps": "10-12", "defaultWeight": 10},
    {"id": "def_16", "name": "Tríceps Corda (Polia)", "muscleGroup": "Tríceps", "defaultSets": 3, "defaultReps": "12-15", "defaultWeight": 20},
    {"id": "def_17", "name": "Tríceps Testa", "muscleGroup": "Tríceps", "defaultSets": 3, "defaultReps": "10-12", "defaultWeight": 15},
    {"id": "def_18", "name": "Abdominal Supra", "muscleGroup": "Abdômen", "defaultSets": 3, "defaultReps": "15-20", "defaultWeight": 0},
    {"id": "def_19", "name": "Prancha Isométrica", "muscleGroup": "Abdômen", "defaultSets": 3, "defaultReps": "60s", "defaultWeight": 0},
    {"id": "def_20", "name": "Panturrilha Sentado", "muscleGroup": "Panturrilhas", "defaultSets": 4, "defaultReps": "15-20", "defaultWeight": 20},
]

DEFAULT_SETTINGS = {
    "default_rest_seconds": 60,
    "progress_points": 10,
}
