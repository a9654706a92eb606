import argparse

from evstations.config import get_settings
from evstations.database.database import ensure_indexes
from evstations.dependencies import get_station_store
from evstations.services.sample_data import seed_sample_data


def main():
    p = argparse.ArgumentParser(description="Crear índices y, opcionalmente, estaciones de ejemplo")
    p.add_argument("--seed", action="store_true", help="insertar las estaciones de ejemplo")
    args = p.parse_args()

    ensure_indexes()
    print("✅ Índices creados correctamente")
    if args.seed:
        count = seed_sample_data(get_station_store(), get_settings().seed_owner_id)
        print(f"✅ {count} estaciones de ejemplo insertadas")


if __name__ == "__main__":
    main()
