from kickoff.pipeline import main

main()
