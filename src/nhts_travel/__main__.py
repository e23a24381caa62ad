from nhts_travel.pipeline import main

main()
