from exif_renamer.cli import main

main()
