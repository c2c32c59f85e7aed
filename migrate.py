#!/usr/bin/env python3
"""
Script para gestionar migraciones de base de datos con Alembic.

La URL de la base de datos se toma de maxcontrol.core.config (DATABASE_URL o
variables POSTGRES_*), no de alembic.ini.
"""
import sys
from pathlib import Path

from alembic.config import Config
from alembic import command

from maxcontrol.core.config import settings

root_dir = Path(__file__).parent


def get_alembic_config() -> Config:
    """Obtener configuración de Alembic apuntando a la base configurada."""
    alembic_cfg = Config(str(root_dir / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(root_dir / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return alembic_cfg


def create_migration(message: str):
    """Crear nueva migración comparando los modelos con la base."""
    command.revision(get_alembic_config(), autogenerate=True, message=message)
    print(f"Migración creada: {message}")


def run_migrations():
    """Ejecutar migraciones pendientes."""
    command.upgrade(get_alembic_config(), "head")
    print("Migraciones ejecutadas exitosamente")


def rollback_migration():
    """Rollback de la última migración."""
    command.downgrade(get_alembic_config(), "-1")
    print("Rollback ejecutado exitosamente")


def stamp_head():
    """Marcar una base creada con create_all como actualizada."""
    command.stamp(get_alembic_config(), "head")
    print("Base marcada en la última migración")


ACTIONS = {
    "upgrade": run_migrations,
    "downgrade": rollback_migration,
    "stamp": stamp_head,
    "history": lambda: command.history(get_alembic_config()),
    "current": lambda: command.current(get_alembic_config()),
}

USAGE = """Uso:
  python migrate.py create 'message'  # Crear migración
  python migrate.py upgrade            # Ejecutar migraciones
  python migrate.py downgrade          # Rollback
  python migrate.py stamp              # Marcar base existente
  python migrate.py history            # Ver historial
  python migrate.py current            # Ver actual"""


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    action = sys.argv[1]

    if action == "create":
        if len(sys.argv) < 3:
            print("Error: Se requiere un mensaje para la migración")
            sys.exit(1)
        create_migration(sys.argv[2])
    elif action in ACTIONS:
        ACTIONS[action]()
    else:
        print(f"Acción desconocida: {action}")
        sys.exit(1)
