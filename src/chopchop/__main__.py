from chopchop.cli import main

main()
