from recipe_importer.app.services.url_parsing.extractors import (
    HEURISTIC_WARNING,
    extract_microdata_recipe,
    extract_recipe_heuristic,
)
from recipe_importer.app.services.url_parsing.normalizer import normalize_recipe


def test_extract_recipe_heuristic():
    html = """
    <html>
      <body>
        <h1>Heuristic Soup</h1>
        <article>
          <ul>
            <li>1 cup broth</li>
            <li>2 tsp salt</li>
          </ul>
          <h2>Directions</h2>
          <ol>
            <li>Heat the broth.</li>
            <li>Add salt.</li>
          </ol>
          <p>Serves 2</p>
        </article>
      </body>
    </html>
    """
    recipe, warnings = extract_recipe_heuristic(html, "https://example.com/soup")
    assert recipe.title == "Heuristic Soup"
    assert [i.name for i in recipe.ingredients] == ["1 cup broth", "2 tsp salt"]
    assert [s.content for s in recipe.instructions] == ["Heat the broth.", "Add salt."]
    assert recipe.servings == 2
    assert recipe.source_url == "https://example.com/soup"
    assert HEURISTIC_WARNING in warnings


def test_heuristic_uses_class_selectors_and_meta():
    html = """
    <html><head>
      <title>Garlic Bread | My Food Blog</title>
      <meta property="og:image" content="/images/bread.jpg">
      <meta name="description" content="Crispy garlic bread.">
    </head><body>
      <nav><ul><li>Home</li><li>About 2 us</li></ul></nav>
      <div class="recipe-ingredients"><ul><li>1 baguette</li><li>4 cloves garlic</li></ul></div>
      <div class="recipe-instructions"><ol><li>Slice the bread.</li><li>Spread garlic butter.</li></ol></div>
    </body></html>
    """
    recipe, warnings = extract_recipe_heuristic(html, "https://example.com/bread")
    assert recipe.title == "Garlic Bread"
    assert recipe.description == "Crispy garlic bread."
    assert recipe.image_url == "https://example.com/images/bread.jpg"
    assert [i.name for i in recipe.ingredients] == ["1 baguette", "4 cloves garlic"]
    assert [s.step for s in recipe.instructions] == [1, 2]
    assert warnings == [HEURISTIC_WARNING]


def test_heuristic_caps_list_length():
    items = "".join(f"<li>{n} cups water</li>" for n in range(1, 60))
    html = f"<html><body><h1>Lots</h1><article><ul>{items}</ul></article></body></html>"
    recipe, _ = extract_recipe_heuristic(html, max_items=30)
    assert len(recipe.ingredients) == 30


def test_heuristic_never_raises_on_garbage():
    for html in ["", "<<<>>>", "<html><body><ol><li>", "\x00\x01 not html at all"]:
        recipe, warnings = extract_recipe_heuristic(html)
        assert recipe.title
        assert HEURISTIC_WARNING in warnings


def test_heuristic_empty_page_has_no_content():
    recipe, warnings = extract_recipe_heuristic("<html><body><p>Hello world</p></body></html>")
    assert not recipe.has_content
    assert "no ingredients found" in warnings
    assert "no instructions found" in warnings


def test_extract_microdata_recipe():
    html = """
    <html><body>
      <div itemscope itemtype="https://schema.org/Recipe">
        <h1 itemprop="name">Micro Pancakes</h1>
        <img itemprop="image" src="https://example.com/pancakes.jpg">
        <meta itemprop="prepTime" content="PT10M">
        <time itemprop="cookTime" datetime="PT15M">15 minutes</time>
        <span itemprop="recipeYield">Makes 8 pancakes</span>
        <div itemprop="author" itemscope itemtype="https://schema.org/Person">
          <span itemprop="name">Chef Someone</span>
        </div>
        <ul>
          <li itemprop="recipeIngredient">1 cup flour</li>
          <li itemprop="recipeIngredient">1 egg</li>
        </ul>
        <ol itemprop="recipeInstructions">
          <li>Whisk everything.</li>
          <li>Fry in a pan.</li>
        </ol>
      </div>
    </body></html>
    """
    data = extract_microdata_recipe(html)
    assert data["name"] == "Micro Pancakes"
    assert data["recipeIngredient"] == ["1 cup flour", "1 egg"]
    assert data["recipeInstructions"] == ["Whisk everything.", "Fry in a pan."]

    recipe, warnings = normalize_recipe(data, source_url="https://example.com/p")
    assert recipe.prep_time_minutes == 10
    assert recipe.cook_time_minutes == 15
    assert recipe.servings == 8
    assert recipe.image_url == "https://example.com/pancakes.jpg"
    assert warnings == []


def test_extract_microdata_step_items():
    html = """
    <div itemscope itemtype="http://schema.org/Recipe">
      <span itemprop="name">Steps</span>
      <div itemprop="recipeInstructions" itemscope itemtype="http://schema.org/HowToStep">
        <span itemprop="text">First step.</span>
      </div>
      <div itemprop="recipeInstructions" itemscope itemtype="http://schema.org/HowToStep">
        <span itemprop="text">Second step.</span>
      </div>
    </div>
    """
    data = extract_microdata_recipe(html)
    assert data["name"] == "Steps"
    assert data["recipeInstructions"] == ["First step.", "Second step."]


def test_extract_microdata_absent():
    assert extract_microdata_recipe("<html><body><h1>Nope</h1></body></html>") is None
