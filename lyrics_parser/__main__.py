from lyrics_parser.cli import main

main()
