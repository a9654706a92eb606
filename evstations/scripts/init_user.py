import argparse

from evstations.auth.security import hash_password
from evstations.dependencies import get_user_store


def main():
    p = argparse.ArgumentParser(description="Crear usuario inicial")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--name", default="Admin")
    args = p.parse_args()

    users = get_user_store()
    email = args.email.lower().strip()
    if users.find_by_email(email):
        print(f"Ya existe un usuario con email {email}")
        return

    user = users.create(args.name, email, hash_password(args.password))
    print(f"Usuario creado: {email} ({user['_id']})")


if __name__ == "__main__":
    main()
