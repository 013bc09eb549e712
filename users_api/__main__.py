from users_api.main import main

main()
