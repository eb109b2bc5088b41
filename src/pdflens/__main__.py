from pdflens.server import main

main()
