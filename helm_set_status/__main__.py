from helm_set_status.cli.app import main

if __name__ == "__main__":
    main()
