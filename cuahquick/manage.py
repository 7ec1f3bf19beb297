"""Administrative commands for the Cuah-Quick database.

Usage:
    python -m cuahquick.manage create-user --full-name "Cafeteria" \
        --email cafeteria@ucq.edu.mx --password '...' --phone 4420000000
    python -m cuahquick.manage seed-menu

Shop accounts cannot register through the API, so this is how they are made.
"""
import argparse
import sys
from decimal import Decimal

from cuahquick import crud
from cuahquick.database import SessionLocal, init_db
from cuahquick.models.user import ROLE_SHOP, USER_ROLES

DEFAULT_MENU = [
    {'name': 'Chilaquiles verdes', 'description': 'Con pollo y crema', 'price': Decimal('65.00'), 'category': 'desayunos'},
    {'name': 'Molletes', 'description': 'Frijoles, queso y pico de gallo', 'price': Decimal('45.00'), 'category': 'desayunos'},
    {'name': 'Torta de jamón', 'description': None, 'price': Decimal('40.00'), 'category': 'comidas'},
    {'name': 'Enchiladas suizas', 'description': 'Orden de tres', 'price': Decimal('70.00'), 'category': 'comidas'},
    {'name': 'Café americano', 'description': None, 'price': Decimal('25.00'), 'category': 'bebidas'},
    {'name': 'Agua fresca', 'description': 'Sabor del día', 'price': Decimal('20.00'), 'category': 'bebidas'},
]


def create_user(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        try:
            user = crud.create_user(
                db,
                full_name=args.full_name,
                email=args.email,
                password=args.password,
                phone=args.phone,
                student_id=args.student_id,
                role=args.role,
            )
        except crud.UniqueViolation:
            print('A user with that email or student ID already exists.', file=sys.stderr)
            return 1

        print('Created user:')
        print(crud.public_user(user))
    return 0


def seed_menu(args: argparse.Namespace) -> int:
    with SessionLocal() as db:
        inserted = crud.seed_products(db, DEFAULT_MENU)
    if inserted:
        print(f'Inserted {inserted} products.')
    else:
        print('Products table already has data; nothing inserted.')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='python -m cuahquick.manage')
    subparsers = parser.add_subparsers(dest='command', required=True)

    user_parser = subparsers.add_parser('create-user', help='create a user account (shop by default)')
    user_parser.add_argument('--full-name', required=True)
    user_parser.add_argument('--email', required=True)
    user_parser.add_argument('--password', required=True)
    user_parser.add_argument('--phone', required=True)
    user_parser.add_argument('--student-id', default=None)
    user_parser.add_argument('--role', choices=USER_ROLES, default=ROLE_SHOP)
    user_parser.set_defaults(handler=create_user)

    menu_parser = subparsers.add_parser('seed-menu', help='insert the default menu into an empty products table')
    menu_parser.set_defaults(handler=seed_menu)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_db()
    return args.handler(args)


if __name__ == '__main__':
    sys.exit(main())
