from teleporter.api.cli import main

main()
