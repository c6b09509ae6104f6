from guardbot.app.bot import main

main()
