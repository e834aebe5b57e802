from rpgen import generate_password

def main() -> None:
    password = generate_password()  # default policy and DEFAULT_CONFIG from config.py
    print("\n[Random Password Generator]")
    print(f"Generated password: {password}\n")

if __name__ == "__main__":
    main()
