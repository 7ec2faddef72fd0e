"""RetroDex - retro-gaming hardware and software catalog"""
