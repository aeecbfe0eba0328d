from mrel.cli.app import main

main()
