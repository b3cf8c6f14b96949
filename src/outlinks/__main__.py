from outlinks.cli.main import main

main()
